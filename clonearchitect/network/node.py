"""Constraint graph nodes.

A node is a tagged variant: the virtual root, a per-sample leaf, or a node
backed by a sub-population cluster. All kinds share an id, a level and a
frequency vector over every sample.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from clonearchitect.elements.cluster import Cluster
from clonearchitect.elements.group import Group


class NodeKind(Enum):
    ROOT = "root"
    LEAF = "leaf"
    CLUSTER = "cluster"


@dataclass(frozen=True, eq=False)
class Node:
    """
    Immutable constraint graph node.

    Equality and hashing go by ``node_id`` so nodes can key adjacency maps and
    be compared across tree copies drawn from the same graph.
    """

    kind: NodeKind
    node_id: int
    level: int
    frequencies: NDArray[np.float64] = field(repr=False)
    std_devs: NDArray[np.float64] = field(repr=False)
    group: Optional[Group] = field(default=None, repr=False)
    cluster: Optional[Cluster] = field(default=None, repr=False)
    sample_index: Optional[int] = None

    @classmethod
    def root(cls, node_id: int, num_samples: int) -> "Node":
        return cls(
            NodeKind.ROOT,
            node_id,
            num_samples + 1,
            np.ones(num_samples),
            np.zeros(num_samples),
        )

    @classmethod
    def leaf(cls, node_id: int, sample_index: int, num_samples: int) -> "Node":
        indicator = np.zeros(num_samples)
        indicator[sample_index] = 1.0
        return cls(
            NodeKind.LEAF,
            node_id,
            0,
            indicator,
            np.zeros(num_samples),
            sample_index=sample_index,
        )

    @classmethod
    def for_cluster(cls, node_id: int, group: Group, cluster: Cluster) -> "Node":
        return cls(
            NodeKind.CLUSTER,
            node_id,
            group.num_samples,
            group.expand(cluster.centroid),
            group.expand(cluster.std_dev),
            group=group,
            cluster=cluster,
        )

    @property
    def is_root(self) -> bool:
        return self.kind is NodeKind.ROOT

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    def aaf(self, sample: int) -> float:
        """Allele frequency of this node in ``sample``."""
        return float(self.frequencies[sample])

    def std_dev(self, sample: int) -> float:
        """Standard deviation of the backing cluster in ``sample`` (0 when absent)."""
        return float(self.std_devs[sample])

    @property
    def label(self) -> str:
        if self.is_root:
            return "germline"
        if self.is_leaf:
            return f"sample{self.sample_index}"
        return str(self.node_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.node_id == other.node_id and self.kind is other.kind

    def __hash__(self) -> int:
        return hash((self.kind, self.node_id))

    def __str__(self) -> str:
        freqs = " ".join(f"{v:.2f}" for v in self.frequencies)
        if self.is_root:
            return f"{self.node_id}: ROOT level={self.level}"
        if self.is_leaf:
            return f"{self.node_id}: LEAF sample={self.sample_index}"
        tag = self.group.tag if self.group is not None else "-"
        size = self.cluster.size if self.cluster is not None else 0
        return f"{self.node_id}: {tag} level={self.level} size={size} [{freqs}]"
