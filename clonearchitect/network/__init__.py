"""Constraint network construction and adjustment."""

from clonearchitect.network.node import Node, NodeKind
from clonearchitect.network.margins import aaf_error_margin, standard_error
from clonearchitect.network.constraint_graph import ConstraintGraph, EdgeDirection
from clonearchitect.network.sample_leaves import (
    attach_sample_leaves,
    make_sample_leaves,
)

__all__ = [
    "Node",
    "NodeKind",
    "aaf_error_margin",
    "standard_error",
    "ConstraintGraph",
    "EdgeDirection",
    "attach_sample_leaves",
    "make_sample_leaves",
]
