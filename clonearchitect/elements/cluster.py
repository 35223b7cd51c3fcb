"""Sub-population cluster model.

A cluster is a set of mutations from one group whose frequency profiles are
statistically similar. Clusters are produced by an external clustering step and
are never edited in place: merging builds a new cluster from the combined
membership.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, eq=False)
class Cluster:
    """
    One sub-population of a mutation group.

    Attributes:
        centroid: Mean frequency per sample. Either over the group's present
            samples or over all samples (see ``Group.expand``).
        std_dev: Per-sample standard deviation, same width as the centroid.
        membership: Indices into the owning group's mutation tuple.
        cluster_id: Identifier, unique within the group.
        robust: Whether the cluster meets the minimum-confidence criteria.
    """

    centroid: NDArray[np.float64]
    std_dev: NDArray[np.float64]
    membership: Tuple[int, ...]
    cluster_id: int = 0
    robust: bool = True
    _size: int = field(init=False, repr=False, compare=False, default=0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "centroid", np.asarray(self.centroid, dtype=float))
        object.__setattr__(self, "std_dev", np.asarray(self.std_dev, dtype=float))
        object.__setattr__(self, "membership", tuple(self.membership))
        object.__setattr__(self, "_size", len(self.membership))
        if self.centroid.shape != self.std_dev.shape:
            raise ValueError(
                f"Cluster {self.cluster_id}: centroid width {self.centroid.shape} "
                f"does not match std-dev width {self.std_dev.shape}"
            )

    @property
    def size(self) -> int:
        return self._size

    @classmethod
    def from_members(
        cls,
        membership: Sequence[int],
        frequency_table: NDArray[np.float64],
        cluster_id: int,
        min_robust_size: int,
    ) -> "Cluster":
        """
        Build a cluster whose statistics are computed from its members.

        Args:
            membership: Row indices into ``frequency_table``.
            frequency_table: Mutations x present-samples frequency matrix of
                the owning group.
            cluster_id: Identifier of the new cluster.
            min_robust_size: Minimum membership size for a robust cluster.
        """
        members = tuple(sorted(set(membership)))
        if not members:
            raise ValueError("Cannot build a cluster without members")
        rows = np.asarray(frequency_table, dtype=float)[list(members)]
        return cls(
            centroid=rows.mean(axis=0),
            std_dev=rows.std(axis=0),
            membership=members,
            cluster_id=cluster_id,
            robust=len(members) >= min_robust_size,
        )

    def merged_with(
        self,
        other: "Cluster",
        frequency_table: NDArray[np.float64],
        min_robust_size: int,
    ) -> "Cluster":
        """Union of two clusters with centroid and std-dev recomputed."""
        return Cluster.from_members(
            self.membership + other.membership,
            frequency_table,
            cluster_id=self.cluster_id,
            min_robust_size=min_robust_size,
        )

    def __str__(self) -> str:
        centroid = " ".join(f"{v:.2f}" for v in self.centroid)
        return f"Cluster {self.cluster_id} [{centroid}] n={self.size}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.cluster_id,
            "centroid": self.centroid.tolist(),
            "std_dev": self.std_dev.tolist(),
            "membership": list(self.membership),
            "robust": self.robust,
        }
