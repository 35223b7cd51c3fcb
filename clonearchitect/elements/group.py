"""Mutation groups.

A group collects the mutations observed in exactly the same subset of samples.
The subset is encoded as a tag: a bitstring over all samples where ``"1"`` marks
a sample the group's mutations occur in. Groups partition the mutation universe.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from clonearchitect.elements.cluster import Cluster
from clonearchitect.elements.mutation import Mutation
from clonearchitect.exceptions import InputFormatError


def sample_indices_from_tag(tag: str) -> Tuple[int, ...]:
    """Return the indices of the samples marked present in ``tag``."""
    if not tag or any(c not in "01" for c in tag):
        raise InputFormatError(f"Group tag must be a non-empty bitstring, got {tag!r}")
    return tuple(i for i, c in enumerate(tag) if c == "1")


@dataclass(frozen=True, eq=False)
class Group:
    """
    Mutations sharing one sample-presence tag, together with their clusters.

    Groups are immutable. Edits (used by network adjustments) return a new
    group that shares the mutation records with the original.
    """

    tag: str
    mutations: Tuple[Mutation, ...] = ()
    clusters: Tuple[Cluster, ...] = ()
    robust: bool = True
    sample_indices: Tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mutations", tuple(self.mutations))
        object.__setattr__(self, "clusters", tuple(self.clusters))
        object.__setattr__(self, "sample_indices", sample_indices_from_tag(self.tag))
        for cluster in self.clusters:
            if len(cluster.centroid) not in (self.num_samples, self.total_samples):
                raise InputFormatError(
                    f"Cluster {cluster.cluster_id} of group {self.tag} has "
                    f"{len(cluster.centroid)} centroid values; expected "
                    f"{self.num_samples} or {self.total_samples}"
                )
            if self.mutations and any(
                i < 0 or i >= len(self.mutations) for i in cluster.membership
            ):
                raise InputFormatError(
                    f"Cluster {cluster.cluster_id} of group {self.tag} refers to "
                    f"mutations outside the group's {len(self.mutations)} records"
                )

    @property
    def num_samples(self) -> int:
        """Number of samples the group's mutations occur in."""
        return len(self.sample_indices)

    @property
    def total_samples(self) -> int:
        return len(self.tag)

    def expand(self, values: Sequence[float]) -> NDArray[np.float64]:
        """
        Scatter a per-sample vector to the full sample width.

        ``values`` may already span all samples, or only the samples present in
        the tag, in which case absent samples are filled with zero.
        """
        arr = np.asarray(values, dtype=float)
        if len(arr) == self.total_samples:
            return arr.copy()
        if len(arr) != self.num_samples:
            raise InputFormatError(
                f"Group {self.tag}: cannot expand {len(arr)} values to "
                f"{self.total_samples} samples"
            )
        full = np.zeros(self.total_samples)
        full[list(self.sample_indices)] = arr
        return full

    def frequency_table(self) -> NDArray[np.float64]:
        """Mutations x present-samples allele frequency matrix."""
        if not self.mutations:
            return np.zeros((0, self.num_samples))
        idx = list(self.sample_indices)
        return np.vstack([self.expand(m.frequencies)[idx] for m in self.mutations])

    def restrict(self, values: Sequence[float]) -> NDArray[np.float64]:
        """Inverse of ``expand``: keep only the present-sample values."""
        return self.expand(values)[list(self.sample_indices)]

    def members_of(self, cluster: Cluster) -> Tuple[Mutation, ...]:
        """Mutation records of a cluster; empty when the group carries none."""
        if not self.mutations:
            return ()
        return tuple(self.mutations[i] for i in cluster.membership)

    def without_cluster(self, cluster: Cluster) -> "Group":
        return self.replacing_clusters([cluster], ())

    def replacing_clusters(
        self, removed: Iterable[Cluster], added: Iterable[Cluster]
    ) -> "Group":
        removed_ids = {id(c) for c in removed}
        kept = [c for c in self.clusters if id(c) not in removed_ids]
        return Group(
            tag=self.tag,
            mutations=self.mutations,
            clusters=tuple(kept) + tuple(added),
            robust=self.robust,
        )

    def __str__(self) -> str:
        return (
            f"Group {self.tag}: {len(self.mutations)} mutations, "
            f"{len(self.clusters)} clusters"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "robust": self.robust,
            "mutations": [m.to_dict() for m in self.mutations],
            "clusters": [c.to_dict() for c in self.clusters],
        }
