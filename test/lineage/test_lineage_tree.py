import unittest

from clonearchitect.lineage import LineageTree
from clonearchitect.network import ConstraintGraph


class TestLineageTree(unittest.TestCase):
    def setUp(self):
        from clonearchitect.elements import Group
        from helpers import make_cluster

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
        self.root, self.a, self.b, self.c, self.d = (
            self.graph.nodes_by_id[i] for i in range(5)
        )

    def build(self, edges):
        tree = LineageTree(self.root)
        for parent, child in edges:
            tree.add_node(child)
            tree.add_edge(parent, child)
        return tree

    def test_structure_queries(self):
        tree = self.build([(self.root, self.a), (self.a, self.b), (self.a, self.c)])
        self.assertEqual(len(tree), 4)
        self.assertIs(tree.root, self.root)
        self.assertEqual(tree.children(self.a), [self.b, self.c])
        self.assertEqual(tree.parent(self.c), self.a)
        self.assertTrue(tree.is_descendant(self.root, self.c))
        self.assertFalse(tree.is_descendant(self.c, self.a))
        self.assertFalse(tree.is_descendant(self.a, self.a))
        self.assertTrue(tree.contains_edge(self.a, self.b))
        self.assertNotIn(self.d, tree)

    def test_remove_edge_drops_child(self):
        tree = self.build([(self.root, self.a), (self.a, self.b)])
        tree.remove_edge(self.a, self.b)
        self.assertEqual(len(tree), 2)
        self.assertNotIn(self.b, tree)
        self.assertIsNone(tree.parent(self.b))
        self.assertEqual(tree.children(self.a), [])

    def test_copy_is_independent(self):
        tree = self.build([(self.root, self.a)])
        tree.error_score = 1.5
        clone = tree.copy()
        tree.add_node(self.b)
        tree.add_edge(self.a, self.b)
        self.assertEqual(len(clone), 2)
        self.assertFalse(clone.contains_edge(self.a, self.b))
        self.assertEqual(clone.error_score, 1.5)

    def test_domination(self):
        tree = self.build(
            [(self.root, self.a), (self.a, self.b), (self.a, self.c), (self.a, self.d)]
        )
        # children sum to [0.5, 0.7] against A's [0.5, 0.5]
        self.assertTrue(tree.satisfies_domination(self.a, 0.08))
        self.assertFalse(tree.satisfies_domination(self.a, 0.05))
        self.assertAlmostEqual(tree.domination_excess(), 0.2)

    def test_to_dict(self):
        tree = self.build([(self.root, self.a), (self.a, self.c)])
        d = tree.to_dict()
        self.assertEqual(d["edges"], [[0, 1], [1, 3]])
        self.assertEqual(d["nodes"][0]["kind"], "root")
        self.assertEqual(d["nodes"][2]["tag"], "10")
