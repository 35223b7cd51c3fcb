"""Lineage reconstruction pipeline."""

from typing import List, Optional, Sequence
import logging
import time

from clonearchitect.config import LineageConfig
from clonearchitect.elements.cluster import Cluster
from clonearchitect.elements.group import Group
from clonearchitect.lineage.consistency import ConsistencyValidator
from clonearchitect.lineage.enumeration import SpanningTreeEnumerator
from clonearchitect.lineage.ranking import TreeRanker
from clonearchitect.lineage.tree import LineageTree
from clonearchitect.lineage.types import EnumerationStats, LineageResult
from clonearchitect.logger import lineage_logger
from clonearchitect.network.constraint_graph import ConstraintGraph


class LineageEngine:
    """
    Coordinates the full workflow from clustered mutation groups to ranked
    lineage trees.

    This includes constraint network construction, spanning tree enumeration,
    network adjustment when no tree is found, ranking, and the consistency
    check of the top trees.
    """

    def __init__(
        self,
        config: Optional[LineageConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the lineage engine.

        Args:
            config: Reconstruction settings.
            logger: Logger instance for pipeline events.
        """
        self.config: LineageConfig = config or LineageConfig()
        self.logger = logger or logging.getLogger(self.config.logger_name)
        self.ranker = TreeRanker(self.config)
        self.validator = ConsistencyValidator(self.config)

    def reconstruct(self, groups: Sequence[Group], num_samples: int) -> LineageResult:
        """
        Executes the complete reconstruction.

        Args:
            groups: Mutation groups with their clusters.
            num_samples: Total number of samples.

        Returns:
            A LineageResult with the ranked trees. The tree list is empty when
            no network adjustment could produce a valid tree.
        """
        start_time = time.time()

        graph = ConstraintGraph(groups, num_samples, self.config)
        graph.log_summary()
        trees, stats, graph, removed = self._search_with_adjustments(graph)

        if not trees:
            self.logger.warning(
                f"No valid lineage tree found after removing {len(removed)} clusters"
            )
            return LineageResult(
                graph=graph,
                removed_clusters=removed,
                rebuilds=len(removed),
                stats=stats,
                processing_time=time.time() - start_time,
            )

        ranked, reports = self.ranker.evaluate(trees, self.validator)
        if not lineage_logger.disabled:
            lineage_logger.section("Best lineage tree")
            lineage_logger.log_tree(ranked[0])

        processing_time = time.time() - start_time
        self.logger.info(
            f"Ranked {len(ranked)} lineage trees in {processing_time:.2f} seconds"
        )
        return LineageResult(
            graph=graph,
            trees=ranked,
            removed_clusters=removed,
            rebuilds=len(removed),
            stats=stats,
            consistency_reports=reports,
            processing_time=processing_time,
        )

    # --- Private helpers ---

    def _search_with_adjustments(self, graph: ConstraintGraph):
        """
        Enumerate trees, shrinking the network until a tree is found, the
        rebuild budget is spent, or every remaining cluster is robust.
        """
        removed: List[Cluster] = []
        while True:
            enumerator = SpanningTreeEnumerator(graph, self.config)
            trees: List[LineageTree] = enumerator.enumerate()
            stats: EnumerationStats = enumerator.stats
            self.logger.info(
                f"Enumerated {len(trees)} trees over {graph.num_nodes} nodes "
                f"and {graph.num_edges} edges ({stats.grow_calls} grow calls)"
            )
            if stats.halted_by is not None:
                self.logger.info(
                    f"Tree search stopped early ({stats.halted_by.value}); "
                    "results are best effort"
                )
            if trees:
                return trees, stats, graph, removed
            if self.config.max_rebuilds is not None and len(removed) >= self.config.max_rebuilds:
                return trees, stats, graph, removed

            graph, cluster = graph.shrink()
            if cluster is None:
                return trees, stats, graph, removed
            removed.append(cluster)
            self.logger.info(
                f"Adjusted network: removed cluster {cluster.cluster_id} "
                f"(size {cluster.size})"
            )


def reconstruct_lineage(
    groups: Sequence[Group],
    num_samples: int,
    config: Optional[LineageConfig] = None,
) -> LineageResult:
    """Functional entry point for ``LineageEngine.reconstruct``."""
    return LineageEngine(config).reconstruct(groups, num_samples)
