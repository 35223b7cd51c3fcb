import unittest

from clonearchitect.config import LineageConfig
from clonearchitect.elements import Group
from clonearchitect.lineage import (
    ConsistencyValidator,
    LineageTree,
    SpanningTreeEnumerator,
    TreeRanker,
    score_by_edge_errors,
)
from clonearchitect.network import ConstraintGraph

from helpers import make_cluster

B_UNDER_ROOT = frozenset({(0, 1), (0, 2), (1, 3), (1, 4)})


class TestTreeRanker(unittest.TestCase):
    def setUp(self):
        groups = [
            Group(
                "11",
                clusters=(
                    make_cluster([0.5, 0.5], cluster_id=0),
                    make_cluster([0.2, 0.3], cluster_id=1),
                ),
            ),
            Group("10", clusters=(make_cluster([0.3]),)),
            Group("01", clusters=(make_cluster([0.4]),)),
        ]
        self.graph = ConstraintGraph(groups, 2)
        self.trees = SpanningTreeEnumerator(self.graph).enumerate()
        self.ranker = TreeRanker()

    def test_rank_breaks_ties_by_domination_excess(self):
        # every edge here has zero error
        self.assertEqual([t.error_score for t in self.trees], [0.0, 0.0])
        ranked = self.ranker.rank(list(reversed(self.trees)))
        self.assertEqual(ranked[0].edge_set(), B_UNDER_ROOT)

    def test_rank_is_stable(self):
        a, b, c = (LineageTree(self.graph.root) for _ in range(3))
        a.error_score, b.error_score, c.error_score = 0.3, 0.1, 0.1
        self.assertEqual(self.ranker.rank([a, b, c]), [b, c, a])

    def test_score(self):
        tree = self.trees[0]
        tree.error_score = 9.0
        self.assertEqual(self.ranker.score(tree, self.graph), 0.0)
        self.assertEqual(tree.error_score, score_by_edge_errors(tree, self.graph))

    def test_evaluate_checks_top_trees(self):
        ranked, reports = self.ranker.evaluate(self.trees, ConsistencyValidator())
        self.assertEqual(len(reports), 2)
        self.assertTrue(all(r.feasible for r in reports))
        self.assertEqual(ranked[0].edge_set(), B_UNDER_ROOT)
        self.assertAlmostEqual(ranked[1].error_score, 0.01, places=4)

    def test_evaluate_limit(self):
        ranker = TreeRanker(LineageConfig(num_trees_for_consistency_check=1))
        ranked, reports = ranker.evaluate(self.trees, ConsistencyValidator())
        self.assertEqual(len(reports), 1)
        self.assertEqual(len(ranked), 2)
        # the unchecked tree keeps its edge error score
        self.assertEqual(ranked[1].error_score, 0.0)

    def test_failed_trees_stay_in_place(self):
        validator = ConsistencyValidator(LineageConfig(vaf_error_margin=0.01))
        ranked, reports = self.ranker.evaluate(self.trees, validator)
        self.assertEqual([r.feasible for r in reports], [True, False])
        self.assertEqual(len(ranked), 2)

    def test_rerank_prefix(self):
        trees = [LineageTree(self.graph.root) for _ in range(4)]
        for tree, score in zip(trees, [0.5, 0.2, 0.1, 0.0]):
            tree.error_score = score
        expected_tail = trees[3]

        result = self.ranker.rerank_prefix(trees, 3)

        self.assertIs(result, trees)
        self.assertEqual([t.error_score for t in trees], [0.1, 0.2, 0.5, 0.0])
        self.assertIs(trees[3], expected_tail)
