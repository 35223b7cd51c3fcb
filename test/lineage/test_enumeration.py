import itertools
import unittest
from unittest import mock

import pytest

from clonearchitect.config import LineageConfig
from clonearchitect.elements import Group
from clonearchitect.lineage import (
    HaltReason,
    LineageTree,
    SpanningTreeEnumerator,
    enumerate_lineage_trees,
)
from clonearchitect.network import ConstraintGraph

from helpers import make_cluster

# root=0, A=1, B=2, C=3, D=4
B_UNDER_ROOT = frozenset({(0, 1), (0, 2), (1, 3), (1, 4)})
B_UNDER_A = frozenset({(0, 1), (1, 2), (1, 3), (1, 4)})


def edge_snapshot(graph):
    return {p.node_id: [c.node_id for c in nbrs] for p, nbrs in graph.edges.items()}


class TestSpanningTreeEnumerator(unittest.TestCase):
    def setUp(self):
        self.groups = [
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
        self.graph = ConstraintGraph(self.groups, 2)

    def test_finds_both_trees(self):
        trees = SpanningTreeEnumerator(self.graph).enumerate()
        self.assertEqual({t.edge_set() for t in trees}, {B_UNDER_ROOT, B_UNDER_A})
        self.assertEqual(len(trees), 2)

    def test_trees_are_valid_spanning_trees(self):
        config = self.graph.config
        trees = SpanningTreeEnumerator(self.graph).enumerate()
        for tree in trees:
            self.assertEqual(len(tree), self.graph.num_nodes)
            self.assertIs(tree.root, self.graph.root)
            self.assertEqual(tree.reachable_from_root(), set(self.graph.nodes_by_id.values()))
            for parent, child in tree.iter_edges():
                self.assertTrue(self.graph.has_edge(parent, child))
            for node in tree.nodes:
                self.assertTrue(tree.satisfies_domination(node, config.vaf_error_margin))

    def test_network_is_left_unchanged(self):
        before = edge_snapshot(self.graph)
        SpanningTreeEnumerator(self.graph).enumerate()
        self.assertEqual(edge_snapshot(self.graph), before)

    def test_repeated_enumeration_is_independent(self):
        enumerator = SpanningTreeEnumerator(self.graph)
        first = [t.edge_set() for t in enumerator.enumerate()]
        second = [t.edge_set() for t in enumerator.enumerate()]
        self.assertEqual(first, second)
        self.assertTrue(enumerator.stats.complete)
        self.assertEqual(enumerator.stats.trees_found, 2)

    def test_max_trees(self):
        enumerator = SpanningTreeEnumerator(self.graph, LineageConfig(max_trees=1))
        trees = enumerator.enumerate()
        self.assertEqual(len(trees), 1)
        self.assertEqual(enumerator.stats.halted_by, HaltReason.MAX_TREES)
        self.assertFalse(enumerator.stats.complete)

    def test_max_grow_calls(self):
        enumerator = SpanningTreeEnumerator(self.graph, LineageConfig(max_grow_calls=1))
        trees = enumerator.enumerate()
        self.assertEqual(trees, [])
        self.assertEqual(enumerator.stats.halted_by, HaltReason.MAX_GROW_CALLS)
        # an early stop still restores the working state
        self.assertEqual(len(enumerator._state.frontier), 2)

    def test_edge_error_score(self):
        groups = [
            Group("11", clusters=(make_cluster([0.40, 0.5]),)),
            Group("10", clusters=(make_cluster([0.45]),)),
        ]
        graph = ConstraintGraph(groups, 2)
        trees, stats = enumerate_lineage_trees(graph)
        self.assertEqual(len(trees), 1)
        self.assertAlmostEqual(trees[0].error_score, 0.05)
        self.assertEqual(stats.trees_found, 1)


def test_root_only_network():
    graph = ConstraintGraph([Group("11")], 2)
    trees, stats = enumerate_lineage_trees(graph)
    assert trees == []
    assert stats.grow_calls == 0
    assert stats.complete


def test_no_tree_when_root_is_overloaded(overloaded_root_groups):
    graph = ConstraintGraph(overloaded_root_groups, 2)
    trees, stats = enumerate_lineage_trees(graph)
    assert trees == []
    assert stats.complete


@pytest.mark.parametrize("max_trees", [1, 2, 5])
def test_tree_cap_is_respected(two_sample_groups, max_trees):
    graph = ConstraintGraph(two_sample_groups, 2)
    trees, _ = enumerate_lineage_trees(graph, LineageConfig(max_trees=max_trees))
    assert len(trees) == min(max_trees, 2)
    assert len({t.edge_set() for t in trees}) == len(trees)


def arborescences(graph):
    """Every spanning arborescence of ``graph`` rooted at its root, by brute force."""
    root = graph.root
    others = [n for n in graph.nodes_by_id.values() if n != root]
    found = set()
    for choice in itertools.product(*(graph.parents(n) for n in others)):
        parent_of = dict(zip(others, choice))
        spans = True
        for node in others:
            seen = set()
            while node != root and node not in seen:
                seen.add(node)
                node = parent_of[node]
            if node != root:
                spans = False
                break
        if spans:
            found.add(frozenset((p.node_id, c.node_id) for c, p in parent_of.items()))
    return found


@pytest.fixture
def dense_graph():
    groups = [
        Group(
            "111",
            clusters=(
                make_cluster([0.9, 0.9, 0.9], cluster_id=0),
                make_cluster([0.5, 0.5, 0.5], cluster_id=1),
            ),
        ),
        Group(
            "110",
            clusters=(
                make_cluster([0.4, 0.4], cluster_id=0),
                make_cluster([0.3, 0.3], cluster_id=1),
            ),
        ),
        Group("011", clusters=(make_cluster([0.3, 0.3]),)),
        Group(
            "100",
            clusters=(make_cluster([0.2], cluster_id=0), make_cluster([0.1], cluster_id=1)),
        ),
    ]
    return ConstraintGraph(groups, 3, LineageConfig(all_edges=True))


def test_dense_network_trees_are_distinct(dense_graph):
    trees, stats = enumerate_lineage_trees(dense_graph)
    edge_sets = [t.edge_set() for t in trees]

    assert stats.complete
    assert len(trees) > 1
    assert len(set(edge_sets)) == len(edge_sets)
    assert set(edge_sets) <= arborescences(dense_graph)
    for tree in trees:
        assert len(tree) == dense_graph.num_nodes


def test_unconstrained_search_finds_every_arborescence(dense_graph):
    expected = arborescences(dense_graph)

    with mock.patch.object(LineageTree, "satisfies_domination", return_value=True):
        trees, stats = enumerate_lineage_trees(dense_graph)

    edge_sets = [t.edge_set() for t in trees]
    assert stats.complete
    assert len(edge_sets) == len(set(edge_sets))
    assert set(edge_sets) == expected
    assert len(expected) > 100
