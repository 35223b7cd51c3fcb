"""Ranking of candidate lineage trees."""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from clonearchitect.config import LineageConfig
from clonearchitect.lineage.tree import LineageTree
from clonearchitect.lineage.types import ConsistencyReport
from clonearchitect.logger import lineage_logger

if TYPE_CHECKING:
    from clonearchitect.lineage.consistency import ConsistencyValidator
    from clonearchitect.network.constraint_graph import ConstraintGraph


def score_by_edge_errors(tree: LineageTree, graph: ConstraintGraph) -> float:
    """Sum of the direction-selection errors of the network edges the tree uses."""
    return sum(graph.edge_error(p, c) for p, c in tree.iter_edges())


def tree_rank_key(tree: LineageTree) -> Tuple[float, float]:
    """
    Ranking key for a lineage tree. Lower is better.

    1. Error score (edge errors, or the consistency score once validated)
    2. Total children-sum excess over parent frequencies (tie-breaker)
    """
    return (tree.error_score, tree.domination_excess())


class TreeRanker:
    """
    Orders lineage trees by error score and refines the top of the list
    with the consistency check.

    Usage:
        ranker = TreeRanker(config)
        ranked, reports = ranker.evaluate(trees, ConsistencyValidator(config))
    """

    def __init__(self, config: Optional[LineageConfig] = None):
        self.config = config or LineageConfig()

    def score(self, tree: LineageTree, graph: ConstraintGraph) -> float:
        tree.error_score = score_by_edge_errors(tree, graph)
        return tree.error_score

    def rank(self, trees: Sequence[LineageTree]) -> List[LineageTree]:
        """Stable ascending sort by ``tree_rank_key``."""
        return sorted(trees, key=tree_rank_key)

    def evaluate(
        self,
        trees: Sequence[LineageTree],
        validator: ConsistencyValidator,
        num_to_check: Optional[int] = None,
    ) -> Tuple[List[LineageTree], List[ConsistencyReport]]:
        """
        Sort the trees, then run the consistency check on the top ones.

        Validation overwrites the error score of the trees that pass, but the
        list order is left as sorted before validation; call ``rerank_prefix``
        to re-sort the validated prefix. Trees failing the check stay in place.
        """
        ranked = self.rank(trees)
        k = self.config.num_trees_for_consistency_check if num_to_check is None else num_to_check
        k = min(k, len(ranked))
        reports = validator.validate_all(ranked[:k])
        for i, report in enumerate(reports):
            if not report.feasible and not lineage_logger.disabled:
                lineage_logger.info(f"Top tree {i} did not pass the QP consistency check")
        return ranked, reports

    def rerank_prefix(self, trees: List[LineageTree], k: int) -> List[LineageTree]:
        """Re-sort the first ``k`` trees in place by their (refined) scores."""
        k = min(k, len(trees))
        trees[:k] = sorted(trees[:k], key=tree_rank_key)
        return trees
