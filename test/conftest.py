import logging

import numpy as np
import pytest

from clonearchitect.elements import Cluster, Group, Mutation
from clonearchitect.logger import lineage_logger

from helpers import make_cluster


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Enable lineage logger so the tracing paths run too
    lineage_logger.disabled = False


@pytest.fixture
def two_sample_groups():
    """
    Two samples. Group "11" holds A=[0.5, 0.5] and B=[0.2, 0.3], group "10"
    holds C=[0.3] and group "01" holds D=[0.4].
    """
    return [
        Group(
            "11",
            clusters=(
                make_cluster([0.5, 0.5], cluster_id=0),
                make_cluster([0.2, 0.3], cluster_id=1),
            ),
        ),
        Group("10", clusters=(make_cluster([0.3], cluster_id=0),)),
        Group("01", clusters=(make_cluster([0.4], cluster_id=0),)),
    ]


@pytest.fixture
def overloaded_root_groups():
    """
    No spanning tree exists: the root cannot hold P, Q and R together and
    nothing else can parent P or Q. R is a small non-robust cluster.
    """
    return [
        Group("11", clusters=(make_cluster([0.5, 0.5], size=1, robust=False),)),
        Group("10", clusters=(make_cluster([0.9]),)),
        Group("01", clusters=(make_cluster([0.9]),)),
    ]


@pytest.fixture
def group_with_mutations():
    """Group "110" over three samples with four mutations and two clusters."""
    mutations = tuple(
        Mutation.from_values(i, freqs, chromosome="chr1", position=100 * (i + 1))
        for i, freqs in enumerate(
            [[0.40, 0.30, 0.0], [0.44, 0.34, 0.0], [0.10, 0.20, 0.0], [0.12, 0.18, 0.0]]
        )
    )
    table = np.array([m.frequencies[:2] for m in mutations])
    clusters = (
        Cluster.from_members((0, 1), table, cluster_id=0, min_robust_size=2),
        Cluster.from_members((2,), table, cluster_id=1, min_robust_size=2),
        Cluster.from_members((3,), table, cluster_id=2, min_robust_size=2),
    )
    return Group("110", mutations=mutations, clusters=clusters)
