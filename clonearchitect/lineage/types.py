"""Core type definitions for lineage reconstruction."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from clonearchitect.config import LineageConfig

if TYPE_CHECKING:
    from clonearchitect.elements.cluster import Cluster
    from clonearchitect.lineage.tree import LineageTree
    from clonearchitect.network.constraint_graph import ConstraintGraph

__all__ = [
    "LineageConfig",
    "HaltReason",
    "EnumerationStats",
    "ConsistencyReport",
    "LineageResult",
]


class HaltReason(Enum):
    MAX_GROW_CALLS = "max_grow_calls"
    MAX_TREES = "max_trees"


@dataclass
class EnumerationStats:
    """Counters of one spanning tree search."""

    grow_calls: int = 0
    trees_found: int = 0
    halted_by: Optional[HaltReason] = None

    @property
    def complete(self) -> bool:
        """True when the search explored the whole space without hitting a bound."""
        return self.halted_by is None


@dataclass
class ConsistencyReport:
    """Outcome of the consistency check of a single tree."""

    feasible: bool
    score: Optional[float] = None
    message: str = ""


@dataclass
class LineageResult:
    """Result of a full reconstruction run."""

    graph: Optional[ConstraintGraph]
    trees: List[LineageTree] = field(default_factory=list)
    removed_clusters: List[Cluster] = field(default_factory=list)
    rebuilds: int = 0
    stats: Optional[EnumerationStats] = None
    consistency_reports: List[ConsistencyReport] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def best_tree(self) -> Optional[LineageTree]:
        return self.trees[0] if self.trees else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_trees": len(self.trees),
            "trees": [t.to_dict() for t in self.trees],
            "removed_clusters": [c.to_dict() for c in self.removed_clusters],
            "rebuilds": self.rebuilds,
            "grow_calls": self.stats.grow_calls if self.stats else 0,
            "halted_by": (
                self.stats.halted_by.value
                if self.stats and self.stats.halted_by
                else None
            ),
            "consistency": [
                {"feasible": r.feasible, "score": r.score, "message": r.message}
                for r in self.consistency_reports
            ],
            "processing_time": self.processing_time,
        }
