from __future__ import annotations
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

import numpy as np

from clonearchitect.network.margins import aaf_error_margin
from clonearchitect.network.node import Node


class LineageTree:
    """
    A spanning arborescence over (a subset of) the constraint network nodes.

    The tree shares its Node objects with the network it was drawn from and
    keeps its own ordered node list and parent -> children adjacency, so a
    copy stays valid while the search keeps mutating the working tree.
    """

    __slots__ = ("nodes", "edges", "error_score", "_node_set", "_parent")

    def __init__(self, root: Optional[Node] = None):
        self.nodes: List[Node] = []
        self.edges: Dict[Node, List[Node]] = {}
        self.error_score: float = 0.0
        self._node_set: Set[Node] = set()
        self._parent: Dict[Node, Node] = {}
        if root is not None:
            self.add_node(root)

    # ---- Mutation (used by the spanning tree search) ----

    def add_node(self, node: Node) -> None:
        if node not in self._node_set:
            self.nodes.append(node)
            self._node_set.add(node)

    def add_edge(self, parent: Node, child: Node) -> None:
        self.edges.setdefault(parent, []).append(child)
        self._parent[child] = parent

    def remove_edge(self, parent: Node, child: Node) -> None:
        """Detach ``child`` from ``parent`` and drop it from the node set."""
        nbrs = self.edges.get(parent)
        if nbrs is not None and child in nbrs:
            nbrs.remove(child)
            if not nbrs:
                del self.edges[parent]
        self._parent.pop(child, None)
        if child in self._node_set:
            self._node_set.discard(child)
            self.nodes.remove(child)

    def copy(self) -> "LineageTree":
        clone = LineageTree()
        clone.nodes = list(self.nodes)
        clone.edges = {p: list(c) for p, c in self.edges.items()}
        clone.error_score = self.error_score
        clone._node_set = set(self._node_set)
        clone._parent = dict(self._parent)
        return clone

    # ---- Queries ----

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._node_set

    def contains_node(self, node: Node) -> bool:
        return node in self._node_set

    def contains_edge(self, parent: Node, child: Node) -> bool:
        return child in self.edges.get(parent, [])

    def children(self, node: Node) -> List[Node]:
        return list(self.edges.get(node, []))

    def parent(self, node: Node) -> Optional[Node]:
        return self._parent.get(node)

    def iter_edges(self) -> Iterator[Tuple[Node, Node]]:
        for parent, children in self.edges.items():
            for child in children:
                yield parent, child

    def edge_set(self) -> FrozenSet[Tuple[int, int]]:
        """Edges as ``(parent_id, child_id)`` pairs, for comparing trees."""
        return frozenset((p.node_id, c.node_id) for p, c in self.iter_edges())

    def is_descendant(self, ancestor: Node, node: Node) -> bool:
        """True if ``node`` lies strictly below ``ancestor``."""
        current = self._parent.get(node)
        while current is not None:
            if current == ancestor:
                return True
            current = self._parent.get(current)
        return False

    def reachable_from_root(self) -> Set[Node]:
        seen: Set[Node] = set()
        if not self.nodes:
            return seen
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            stack.extend(self.edges.get(node, []))
        return seen

    # ---- Frequency constraints ----

    def satisfies_domination(self, node: Node, baseline: float) -> bool:
        """
        Check that ``node``'s frequency covers the sum of its children's in
        every sample, allowing the summed parent-child error margins.
        """
        children = self.edges.get(node)
        if not children:
            return True
        for i in range(len(node.frequencies)):
            child_sum = 0.0
            margin = 0.0
            for child in children:
                child_sum += child.aaf(i)
                margin += aaf_error_margin(node, child, i, baseline)
            if child_sum > node.aaf(i) + margin:
                return False
        return True

    def domination_excess(self) -> float:
        """Total amount by which children-sums exceed their parent's frequency."""
        excess = 0.0
        for parent, children in self.edges.items():
            child_sum = np.sum([c.frequencies for c in children], axis=0)
            excess += float(np.clip(child_sum - parent.frequencies, 0.0, None).sum())
        return excess

    # ---- Output ----

    def __lt__(self, other: "LineageTree") -> bool:
        return self.error_score < other.error_score

    def __str__(self) -> str:
        lines = [f"Lineage tree ({len(self.nodes)} nodes, error {self.error_score:.6g})"]
        lines.extend(f"{p.node_id} -> {c.node_id}" for p, c in self.iter_edges())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"LineageTree(nodes={len(self.nodes)}, error_score={self.error_score:.6g})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_score": self.error_score,
            "nodes": [
                {
                    "id": n.node_id,
                    "kind": n.kind.value,
                    "level": n.level,
                    "tag": n.group.tag if n.group is not None else None,
                    "frequencies": n.frequencies.tolist(),
                }
                for n in self.nodes
            ],
            "edges": [[p.node_id, c.node_id] for p, c in self.iter_edges()],
        }
