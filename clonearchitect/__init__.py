# mypy: ignore-errors
"""Core CloneArchitect package."""

__all__ = [
    "Mutation",
    "Cluster",
    "Group",
    "ConstraintGraph",
    "LineageTree",
    "SpanningTreeEnumerator",
    "ConsistencyValidator",
    "TreeRanker",
    "LineageConfig",
    "LineageEngine",
    "LineageResult",
]


def __getattr__(name):
    if name in {"Mutation", "Cluster", "Group"}:
        from .elements import Mutation, Cluster, Group

        return locals()[name]
    if name == "ConstraintGraph":
        from .network.constraint_graph import ConstraintGraph

        return ConstraintGraph
    if name in {
        "LineageTree",
        "SpanningTreeEnumerator",
        "ConsistencyValidator",
        "TreeRanker",
        "LineageEngine",
    }:
        from .lineage import (
            LineageTree,
            SpanningTreeEnumerator,
            ConsistencyValidator,
            TreeRanker,
            LineageEngine,
        )

        return locals()[name]
    if name in {"LineageConfig", "LineageResult"}:
        from .lineage.types import LineageConfig, LineageResult

        return locals()[name]
    raise AttributeError(name)
