"""
Spanning lineage tree enumeration.

Enumerates the directed spanning trees of a constraint network rooted at its
virtual root with the depth-first GROW procedure of Gabow & Myers (1978):

- ``T`` is the partial tree grown so far.
- ``F`` is a LIFO stack of network edges from nodes in ``T`` to nodes outside it.
- Each popped edge ``(u, v)`` extends ``T``; the branch is explored only if
  ``u`` still covers the summed frequency of its children.
- After a branch the edge is deleted from the working network so no later
  branch emits the same tree, and a bridge test decides whether any further
  tree can still be reached from ``T``.

Every mutation of ``F`` and of the working network is made inside a scoped
guard that undoes it in reverse order on frame exit, including when a search
bound stops the enumeration early.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from clonearchitect.config import LineageConfig
from clonearchitect.lineage.ranking import score_by_edge_errors
from clonearchitect.lineage.tree import LineageTree
from clonearchitect.lineage.types import EnumerationStats, HaltReason
from clonearchitect.logger import lineage_logger
from clonearchitect.network.constraint_graph import ConstraintGraph
from clonearchitect.network.node import Node

Edge = Tuple[Node, Node]

PROGRESS_INTERVAL = 1_000_000


class EdgeStack:
    """LIFO stack of candidate tree edges (the frontier ``F``)."""

    __slots__ = ("_edges",)

    def __init__(self, edges: Optional[List[Edge]] = None):
        self._edges: List[Edge] = list(edges or [])

    def push(self, edge: Edge) -> None:
        self._edges.append(edge)

    def pop(self) -> Edge:
        return self._edges.pop()

    def extend(self, edges: List[Edge]) -> None:
        self._edges.extend(edges)

    def remove_all(self, edges: List[Edge]) -> None:
        """Remove every occurrence of the given edges, keeping the order of the rest."""
        if not edges:
            return
        doomed = set(edges)
        self._edges = [e for e in self._edges if e not in doomed]

    def snapshot(self) -> List[Edge]:
        return list(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)


@dataclass
class EnumerationState:
    """Mutable state of one enumeration, threaded through the recursion."""

    frontier: EdgeStack
    adjacency: Dict[Node, List[Node]]
    trees: List[LineageTree] = field(default_factory=list)
    last_tree: Optional[LineageTree] = None
    grow_calls: int = 0
    halted_by: Optional[HaltReason] = None


class SpanningTreeEnumerator:
    """
    Enumerates the spanning lineage trees of a constraint network.

    The network itself is never modified: the search deletes and restores edges
    on a private copy of the adjacency. Each call to ``enumerate`` starts from
    fresh state, so several enumerations can run independently.

    Usage:
        enumerator = SpanningTreeEnumerator(graph, config)
        trees = enumerator.enumerate()
        if not enumerator.stats.complete:
            ...  # best-effort result, a search bound was hit
    """

    def __init__(self, graph: ConstraintGraph, config: Optional[LineageConfig] = None):
        self.graph = graph
        self.config = config or graph.config
        self.stats = EnumerationStats()
        self._state: Optional[EnumerationState] = None

    def enumerate(self) -> List[LineageTree]:
        """
        Generate all spanning trees rooted at the network root that pass the
        frequency constraints, up to the configured bounds.

        Returns:
            Completed trees in discovery order, each scored with the sum of its
            edge errors.
        """
        root = self.graph.root
        adjacency = self.graph.working_adjacency()
        frontier = EdgeStack([(root, child) for child in adjacency.get(root, [])])
        state = EnumerationState(frontier=frontier, adjacency=adjacency)
        self._state = state

        if len(frontier) > 0:
            self._grow(LineageTree(root), state)

        self.stats = EnumerationStats(
            grow_calls=state.grow_calls,
            trees_found=len(state.trees),
            halted_by=state.halted_by,
        )
        if not lineage_logger.disabled:
            lineage_logger.info(
                f"Found {len(state.trees)} spanning trees in {state.grow_calls} grow calls"
                + (f" (halted by {state.halted_by.value})" if state.halted_by else "")
            )
        return state.trees

    def _grow(self, tree: LineageTree, state: EnumerationState) -> None:
        state.grow_calls += 1
        if state.grow_calls > self.config.max_grow_calls:
            state.halted_by = HaltReason.MAX_GROW_CALLS
            return
        if state.grow_calls % PROGRESS_INTERVAL == 0 and not lineage_logger.disabled:
            lineage_logger.info(f"{state.grow_calls} grow calls")

        if len(tree) == self.graph.num_nodes:
            self._record(tree, state)
            return

        with self._deleted_edges(state) as deleted:
            bridge = False
            while not bridge and len(state.frontier) > 0:
                parent, child = state.frontier.pop()
                tree.add_node(child)
                tree.add_edge(parent, child)

                if tree.satisfies_domination(parent, self.config.vaf_error_margin):
                    with self._extended_frontier(tree, child, state):
                        self._grow(tree, state)

                tree.remove_edge(parent, child)
                self._remove_working_edge(state, parent, child)
                deleted.append((parent, child))

                if state.halted_by is not None:
                    break
                bridge = self._is_bridge(child, state)

    def _record(self, tree: LineageTree, state: EnumerationState) -> None:
        # the working tree stands in for the last completed tree
        state.last_tree = tree
        completed = tree.copy()
        completed.error_score = score_by_edge_errors(completed, self.graph)
        state.trees.append(completed)
        if len(state.trees) >= self.config.max_trees:
            state.halted_by = HaltReason.MAX_TREES

    @contextmanager
    def _extended_frontier(
        self, tree: LineageTree, node: Node, state: EnumerationState
    ) -> Iterator[None]:
        """
        Push the edges leaving ``node`` to nodes outside the tree and drop the
        edges entering ``node`` from tree nodes; undo both on exit.
        """
        added = [
            (node, w) for w in state.adjacency.get(node, []) if not tree.contains_node(w)
        ]
        state.frontier.extend(added)
        removed = [
            e for e in state.frontier if e[1] == node and tree.contains_node(e[0])
        ]
        state.frontier.remove_all(removed)
        try:
            yield
        finally:
            state.frontier.remove_all(added)
            state.frontier.extend(removed)

    @contextmanager
    def _deleted_edges(self, state: EnumerationState) -> Iterator[List[Edge]]:
        """Edges deleted during one frame go back to ``F`` and the network on exit."""
        deleted: List[Edge] = []
        try:
            yield deleted
        finally:
            for parent, child in reversed(deleted):
                state.frontier.push((parent, child))
                nbrs = state.adjacency.setdefault(parent, [])
                if child not in nbrs:
                    nbrs.append(child)

    @staticmethod
    def _remove_working_edge(state: EnumerationState, parent: Node, child: Node) -> None:
        nbrs = state.adjacency.get(parent)
        if nbrs is not None and child in nbrs:
            nbrs.remove(child)

    @staticmethod
    def _is_bridge(node: Node, state: EnumerationState) -> bool:
        """
        True when every remaining network edge into ``node`` starts at a
        descendant of ``node`` in the last completed tree.
        """
        last = state.last_tree
        for w, nbrs in state.adjacency.items():
            if node in nbrs and (last is None or not last.is_descendant(node, w)):
                return False
        return True


def enumerate_lineage_trees(
    graph: ConstraintGraph, config: Optional[LineageConfig] = None
) -> Tuple[List[LineageTree], EnumerationStats]:
    """Convenience wrapper returning the trees together with the search counters."""
    enumerator = SpanningTreeEnumerator(graph, config)
    trees = enumerator.enumerate()
    return trees, enumerator.stats
