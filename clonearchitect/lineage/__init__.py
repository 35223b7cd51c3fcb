"""Lineage tree search, ranking and validation."""

from clonearchitect.lineage.types import (
    LineageConfig,
    EnumerationStats,
    ConsistencyReport,
    HaltReason,
    LineageResult,
)
from clonearchitect.lineage.tree import LineageTree
from clonearchitect.lineage.ranking import TreeRanker, score_by_edge_errors
from clonearchitect.lineage.enumeration import (
    SpanningTreeEnumerator,
    enumerate_lineage_trees,
)
from clonearchitect.lineage.consistency import ConsistencyValidator
from clonearchitect.lineage.engine import LineageEngine, reconstruct_lineage

__all__ = [
    "LineageConfig",
    "EnumerationStats",
    "ConsistencyReport",
    "HaltReason",
    "LineageResult",
    "LineageTree",
    "TreeRanker",
    "score_by_edge_errors",
    "SpanningTreeEnumerator",
    "enumerate_lineage_trees",
    "ConsistencyValidator",
    "LineageEngine",
    "reconstruct_lineage",
]
