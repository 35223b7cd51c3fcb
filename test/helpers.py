"""Shared builders for the test suite."""

import numpy as np

from clonearchitect.elements import Cluster


def make_cluster(centroid, std_dev=None, size=3, cluster_id=0, robust=True):
    """Cluster with ``size`` placeholder members and zero spread by default."""
    centroid = np.asarray(centroid, dtype=float)
    return Cluster(
        centroid=centroid,
        std_dev=np.zeros_like(centroid) if std_dev is None else std_dev,
        membership=tuple(range(size)),
        cluster_id=cluster_id,
        robust=robust,
    )
