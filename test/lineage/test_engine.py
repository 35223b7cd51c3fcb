import logging

import pytest

from clonearchitect.config import LineageConfig
from clonearchitect.elements import Group
from clonearchitect.lineage import LineageEngine, reconstruct_lineage

from helpers import make_cluster

B_UNDER_ROOT = frozenset({(0, 1), (0, 2), (1, 3), (1, 4)})


def test_reconstruct(two_sample_groups):
    result = LineageEngine(LineageConfig()).reconstruct(two_sample_groups, 2)

    assert len(result.trees) == 2
    assert result.best_tree.edge_set() == B_UNDER_ROOT
    assert result.rebuilds == 0
    assert result.removed_clusters == []
    assert result.stats.complete
    assert len(result.consistency_reports) == 2
    assert result.processing_time >= 0.0


def test_shrink_and_retry(overloaded_root_groups):
    result = reconstruct_lineage(overloaded_root_groups, 2)

    assert result.rebuilds == 1
    assert result.removed_clusters == [overloaded_root_groups[0].clusters[0]]
    assert len(result.trees) == 1
    assert result.graph.num_nodes == 3
    assert result.best_tree.edge_set() == frozenset({(0, 1), (0, 2)})


def test_no_tree_and_nothing_to_shrink(caplog):
    groups = [
        Group("11", clusters=(make_cluster([0.5, 0.5]),)),
        Group("10", clusters=(make_cluster([0.9]),)),
        Group("01", clusters=(make_cluster([0.9]),)),
    ]
    engine = LineageEngine(LineageConfig(logger_name="clonearchitect.test"))

    with caplog.at_level(logging.WARNING, logger="clonearchitect.test"):
        result = engine.reconstruct(groups, 2)

    assert result.trees == []
    assert result.best_tree is None
    assert result.rebuilds == 0
    assert "No valid lineage tree" in caplog.text


def test_rebuild_budget(overloaded_root_groups):
    result = LineageEngine(LineageConfig(max_rebuilds=0)).reconstruct(
        overloaded_root_groups, 2
    )
    assert result.trees == []
    assert result.rebuilds == 0


def test_custom_logger(two_sample_groups):
    logger = logging.getLogger("clonearchitect.custom")
    engine = LineageEngine(logger=logger)
    assert engine.logger is logger
    assert engine.reconstruct(two_sample_groups, 2).trees


def test_result_to_dict(two_sample_groups):
    result = reconstruct_lineage(two_sample_groups, 2)
    d = result.to_dict()
    assert d["num_trees"] == 2
    assert d["halted_by"] is None
    assert [c["feasible"] for c in d["consistency"]] == [True, True]
    assert sorted(map(tuple, d["trees"][0]["edges"])) == sorted(B_UNDER_ROOT)


@pytest.mark.parametrize("max_trees", [1, 2])
def test_bounded_search_still_ranks(two_sample_groups, max_trees):
    result = reconstruct_lineage(two_sample_groups, 2, LineageConfig(max_trees=max_trees))
    assert len(result.trees) == max_trees
    assert len(result.consistency_reports) == max_trees
