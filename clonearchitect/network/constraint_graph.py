"""
Constraint network of sub-populations.

The network is a DAG with one node per cluster plus a virtual root. A directed
edge ``p -> c`` states that sub-population ``p`` may have happened before ``c``:
in every sample where ``c`` is observed, ``p``'s frequency is at least ``c``'s
within an adaptive error margin. Nodes are arranged in levels, the level of a
cluster node being the number of samples its group's mutations occur in.

The network is immutable once built. Adjustments (shrink, merge, drop) derive a
new network from an edited set of groups; edge admissibility depends on margins
recomputed from cluster statistics, so no incremental repair is attempted.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from clonearchitect.elements.cluster import Cluster
from clonearchitect.elements.group import Group
from clonearchitect.exceptions import (
    EdgeContractError,
    InputFormatError,
    NetworkAdjustmentError,
)
from clonearchitect.config import LineageConfig
from clonearchitect.logger import lineage_logger, format_frequencies
from clonearchitect.network.margins import aaf_error_margin
from clonearchitect.network.node import Node, NodeKind

Edge = Tuple[Node, Node]


class EdgeDirection(Enum):
    FORWARD = 0
    REVERSE = 1
    NONE = -1


class ConstraintGraph:
    """
    Directed constraint graph over the clusters of a set of mutation groups.

    Usage:
        graph = ConstraintGraph(groups, num_samples=3)
        trees = SpanningTreeEnumerator(graph).enumerate()
    """

    def __init__(
        self,
        groups: Sequence[Group],
        num_samples: int,
        config: Optional[LineageConfig] = None,
    ):
        """
        Build the constraint network.

        Args:
            groups: Mutation groups with their clusters.
            num_samples: Total number of samples; every group tag must have this width.
            config: Margin and edge-mode settings.

        Raises:
            InputFormatError: If a group tag does not span ``num_samples`` samples.
        """
        if num_samples < 1:
            raise InputFormatError(f"num_samples must be positive, got {num_samples}")
        for group in groups:
            if group.total_samples != num_samples:
                raise InputFormatError(
                    f"Group tag {group.tag} spans {group.total_samples} samples, "
                    f"expected {num_samples}"
                )

        self.groups: Tuple[Group, ...] = tuple(groups)
        self.num_samples = num_samples
        self.config: LineageConfig = config or LineageConfig()

        self.nodes: Dict[int, List[Node]] = {}
        self.nodes_by_id: Dict[int, Node] = {}
        self.edges: Dict[Node, List[Node]] = {}
        self.edge_errors: Dict[Tuple[int, int], float] = {}
        self.num_nodes = 0
        self.num_edges = 0

        self._build()

    # ---- Network Construction ----

    def _build(self) -> None:
        root = Node.root(self.num_nodes, self.num_samples)
        self._add_node(root)

        for group in self.groups:
            group_nodes = []
            for cluster in group.clusters:
                node = Node.for_cluster(self.num_nodes, group, cluster)
                self._add_node(node)
                group_nodes.append(node)
            # sibling relationships inside one group
            for i in range(len(group_nodes)):
                for j in range(i + 1, len(group_nodes)):
                    self.check_and_add_edge(group_nodes[i], group_nodes[j])

        self._add_inter_level_edges()
        if self.config.all_edges:
            self._add_all_hidden_edges()
        self._repair_orphans(root)

        if not lineage_logger.disabled:
            lineage_logger.info(
                f"Constraint network: {self.num_nodes} nodes, {self.num_edges} edges"
            )

    def _add_inter_level_edges(self) -> None:
        """Connect every level to the nearest non-empty level below it."""
        for i in range(self.num_samples + 1, 0, -1):
            from_level = self.nodes.get(i)
            if not from_level:
                continue
            j = i - 1
            while j > 0 and not self.nodes.get(j):
                j -= 1
            to_level = self.nodes.get(j)
            if not to_level:
                continue
            for n1 in from_level:
                for n2 in to_level:
                    self.check_and_add_edge(n1, n2)

    def _add_all_hidden_edges(self) -> None:
        """Attempt edges between every pair of differing levels above zero."""
        for i in range(self.num_samples + 1, 0, -1):
            from_level = self.nodes.get(i)
            if not from_level:
                continue
            for j in range(i - 1, 0, -1):
                to_level = self.nodes.get(j)
                if not to_level:
                    continue
                for n1 in from_level:
                    for n2 in to_level:
                        self.check_and_add_edge(n1, n2)

    def _repair_orphans(self, root: Node) -> None:
        """Give every node without a parent one from the closest valid higher level."""
        has_parent = {child.node_id for nbrs in self.edges.values() for child in nbrs}
        for node_id in range(1, self.num_nodes):
            if node_id in has_parent:
                continue
            node = self.nodes_by_id[node_id]
            found = False
            for level in range(node.level + 1, self.num_samples + 2):
                for candidate in self.nodes.get(level, []):
                    if self.check_and_add_edge(candidate, node) is EdgeDirection.FORWARD:
                        found = True
                        break
                if found:
                    break
            if not found:
                self.add_edge(root, node, 0.0)
                if not lineage_logger.disabled:
                    lineage_logger.debug(
                        f"Node {node_id} has no valid parent; attached to the root"
                    )

    def _add_node(self, node: Node) -> None:
        self.nodes.setdefault(node.level, []).append(node)
        self.nodes_by_id[node.node_id] = node
        self.num_nodes += 1

    def add_edge(self, parent: Node, child: Node, error: float) -> None:
        """Add ``parent -> child`` unless it is already present."""
        nbrs = self.edges.setdefault(parent, [])
        if child not in nbrs:
            nbrs.append(child)
            self.edge_errors[(parent.node_id, child.node_id)] = error
            self.num_edges += 1

    def _directional_tally(self, parent: Node, child: Node) -> Tuple[int, float]:
        """
        Count the samples where ``parent`` dominates ``child`` within the margin
        and sum the shortfalls. Stops at the first sample where ``parent`` is
        absent while ``child`` is present.
        """
        compatible = 0
        error = 0.0
        baseline = self.config.vaf_error_margin
        for i in range(self.num_samples):
            p, c = parent.aaf(i), child.aaf(i)
            if p == 0 and c != 0:
                break
            if p >= c - aaf_error_margin(parent, child, i, baseline):
                compatible += 1
            if p < c:
                error += c - p
        return compatible, error

    def admissible_direction(self, n1: Node, n2: Node) -> Tuple[EdgeDirection, float]:
        """
        Decide whether an edge between two nodes is admissible and in which direction.

        Returns:
            The direction (``FORWARD`` for n1 -> n2) and the shortfall error of
            that direction.

        Raises:
            EdgeContractError: If ``n1`` sits at a strictly lower level than ``n2``.
        """
        if n1.level < n2.level:
            EdgeContractError.raise_level_order(n1, n2)

        # only sample leaves carry a sample index
        if n2.sample_index is not None:
            if n1.aaf(n2.sample_index) > 0:
                return EdgeDirection.FORWARD, 0.0
            return EdgeDirection.NONE, 0.0

        comp_12, err_12 = self._directional_tally(n1, n2)
        comp_21, err_21 = self._directional_tally(n2, n1)
        forward_ok = comp_12 == self.num_samples
        # an edge never points to a higher level
        reverse_ok = comp_21 == self.num_samples and n1.level == n2.level

        if forward_ok and reverse_ok:
            if err_21 < err_12:
                return EdgeDirection.REVERSE, err_21
            return EdgeDirection.FORWARD, err_12
        if forward_ok:
            return EdgeDirection.FORWARD, err_12
        if reverse_ok:
            return EdgeDirection.REVERSE, err_21
        return EdgeDirection.NONE, 0.0

    def check_and_add_edge(self, n1: Node, n2: Node) -> EdgeDirection:
        """
        Add the admissible edge between two nodes in the lower-error direction.

        Requires ``n1`` to be at an equal or higher level than ``n2``.
        """
        direction, error = self.admissible_direction(n1, n2)
        if direction is EdgeDirection.FORWARD:
            self.add_edge(n1, n2, error)
        elif direction is EdgeDirection.REVERSE:
            self.add_edge(n2, n1, error)
        return direction

    # ---- Queries ----

    @property
    def root(self) -> Node:
        return self.nodes_by_id[0]

    def cluster_nodes(self) -> List[Node]:
        return [n for n in self.nodes_by_id.values() if n.kind is NodeKind.CLUSTER]

    def nodes_at_level(self, level: int) -> List[Node]:
        return list(self.nodes.get(level, []))

    def children(self, node: Node) -> List[Node]:
        return list(self.edges.get(node, []))

    def parents(self, node: Node) -> List[Node]:
        return [p for p, nbrs in self.edges.items() if node in nbrs]

    def has_edge(self, parent: Node, child: Node) -> bool:
        return child in self.edges.get(parent, [])

    def edge_error(self, parent: Node, child: Node) -> float:
        return self.edge_errors.get((parent.node_id, child.node_id), 0.0)

    def iter_edges(self) -> Iterator[Edge]:
        for parent, nbrs in self.edges.items():
            for child in nbrs:
                yield parent, child

    def working_adjacency(self) -> Dict[Node, List[Node]]:
        """A private, mutable copy of the adjacency for tree enumeration."""
        return {parent: list(nbrs) for parent, nbrs in self.edges.items()}

    def node_for_cluster(self, cluster: Cluster) -> Node:
        for node in self.nodes_by_id.values():
            if node.cluster is cluster:
                return node
        raise NetworkAdjustmentError(f"Cluster {cluster.cluster_id} is not in the network")

    # ---- Network Adjustments ----

    def shrink(self) -> Tuple["ConstraintGraph", Optional[Cluster]]:
        """
        Remove the smallest non-robust cluster and rebuild the network.

        Returns:
            The rebuilt network and the removed cluster. When every cluster is
            robust nothing is removed and ``(self, None)`` is returned.
        """
        to_remove: Optional[Tuple[Group, Cluster]] = None
        for node in self.nodes_by_id.values():
            group, cluster = node.group, node.cluster
            if group is None or cluster is None or cluster.robust:
                continue
            if to_remove is None or cluster.size < to_remove[1].size:
                to_remove = (group, cluster)

        if to_remove is None:
            return self, None

        group, cluster = to_remove
        if not lineage_logger.disabled:
            members = group.members_of(cluster)
            lineage_logger.info(
                f"Removed cluster {cluster.cluster_id} of group {group.tag} "
                f"of size {cluster.size}" + (" with members:" if members else "")
            )
            for mutation in members:
                lineage_logger.info(str(mutation))
        return self._rebuild({group: group.without_cluster(cluster)}), cluster

    def merge_clusters(self, n1: Node, n2: Node) -> "ConstraintGraph":
        """
        Collapse two cluster nodes of the same group into one and rebuild.

        Raises:
            NetworkAdjustmentError: If the nodes are not distinct cluster nodes
                of the same group, or the group has no frequency table for
                their members.
        """
        if n1.cluster is None or n2.cluster is None or n1.group is None:
            raise NetworkAdjustmentError("Only cluster nodes can be merged")
        if n1.group is not n2.group:
            raise NetworkAdjustmentError(
                f"Nodes {n1.node_id} and {n2.node_id} belong to different groups"
            )
        if n1 == n2:
            raise NetworkAdjustmentError(f"Cannot merge node {n1.node_id} with itself")

        group = n1.group
        table = group.frequency_table()
        members = n1.cluster.membership + n2.cluster.membership
        if not members or max(members) >= len(table):
            raise NetworkAdjustmentError(
                f"Group {group.tag} has no allele frequencies for the merged members"
            )
        union = n1.cluster.merged_with(
            n2.cluster, table, min_robust_size=self.config.min_robust_cluster_size
        )
        edited = group.replacing_clusters([n1.cluster, n2.cluster], [union])
        return self._rebuild({group: edited})

    def drop_cluster(self, node: Node) -> "ConstraintGraph":
        """Remove a single cluster node and rebuild."""
        if node.cluster is None or node.group is None:
            raise NetworkAdjustmentError(f"Node {node.node_id} is not a cluster node")
        if self.nodes_by_id.get(node.node_id) != node:
            raise NetworkAdjustmentError(f"Node {node.node_id} is not in this network")
        return self._rebuild({node.group: node.group.without_cluster(node.cluster)})

    def _rebuild(self, replacements: Dict[Group, Group]) -> "ConstraintGraph":
        groups = [replacements.get(g, g) for g in self.groups]
        return ConstraintGraph(groups, self.num_samples, self.config)

    # ---- Textual views ----

    def _levels_top_down(self) -> Iterator[Node]:
        for level in range(self.num_samples + 1, -1, -1):
            yield from self.nodes.get(level, [])

    def __str__(self) -> str:
        lines = [
            "--- PHYLOGENETIC CONSTRAINT GRAPH ---",
            f"numNodes = {self.num_nodes}, numEdges = {self.num_edges}",
            "NODES:",
        ]
        for level in range(self.num_samples + 1, -1, -1):
            lines.append(f"level = {level}:")
            lines.extend(str(n) for n in self.nodes.get(level, []))
        lines.append("EDGES:")
        lines.extend(f"{p.node_id} -> {c.node_id}" for p, c in self.iter_edges())
        return "\n".join(lines) + "\n"

    def nodes_as_string(self) -> str:
        """One tab-separated row per cluster node: id, tag, size, frequencies."""
        rows = []
        for node in self._levels_top_down():
            if node.cluster is None or node.group is None:
                continue
            cells = [str(node.node_id), node.group.tag, str(node.cluster.size)]
            cells.extend(f"{v:.2f}" for v in node.frequencies)
            rows.append("\t".join(cells) + "\t\n")
        return "".join(rows)

    def nodes_with_members_as_string(self) -> str:
        rows = []
        for node in self._levels_top_down():
            if node.cluster is None or node.group is None:
                continue
            centroid = " ".join(f"{v:.2f}" for v in node.group.restrict(node.frequencies))
            row = f"{node.node_id}\t{node.group.tag}\t[ {centroid}]"
            for mutation in node.group.members_of(node.cluster):
                row += f"\tsnv{mutation.mutation_id}"
            rows.append(row + "\n")
        return "".join(rows)

    def node_members_as_string(self) -> str:
        rows = []
        for node in self._levels_top_down():
            if node.cluster is None or node.group is None:
                continue
            rows.extend(f"{m}\n" for m in node.group.members_of(node.cluster))
        return "".join(rows)

    def log_summary(self) -> None:
        """Tabulate the network nodes on the lineage logger."""
        if lineage_logger.disabled:
            return
        rows = [
            [
                n.node_id,
                n.level,
                n.group.tag if n.group else "-",
                n.cluster.size if n.cluster else "-",
                format_frequencies(n.frequencies),
                len(self.edges.get(n, [])),
            ]
            for n in self._levels_top_down()
        ]
        lineage_logger.table(
            rows,
            headers=["id", "level", "tag", "size", "frequencies", "out-degree"],
            title=f"Constraint network ({self.num_edges} edges)",
        )
