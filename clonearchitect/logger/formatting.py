"""Text formatting utilities for logging."""

from typing import Any, Iterable, Sequence


def format_frequencies(values: Sequence[float], digits: int = 2) -> str:
    """Format a per-sample frequency vector as '[0.50 0.30]'."""
    return "[" + " ".join(f"{float(v):.{digits}f}" for v in values) + "]"


def format_edge(edge: Any) -> str:
    """Format a (parent, child) pair of nodes as 'p -> c'."""
    parent, child = edge
    return f"{getattr(parent, 'node_id', parent)} -> {getattr(child, 'node_id', child)}"


def format_edges(edges: Iterable[Any]) -> str:
    formatted = [format_edge(e) for e in edges]
    if not formatted:
        return "∅"
    return "{" + ", ".join(formatted) + "}"
