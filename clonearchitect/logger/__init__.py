"""Logging package for CloneArchitect."""

from clonearchitect.logger.base_logger import AlgorithmLogger
from clonearchitect.logger.table_logger import TableLogger
from clonearchitect.logger.lineage_logger import LineageTreeLogger
from clonearchitect.logger.combined_logger import Logger
from clonearchitect.logger.formatting import (
    format_frequencies,
    format_edge,
    format_edges,
)

# Unified singleton for algorithm tracing
lineage_logger = Logger("clonearchitect.lineage")
lineage_logger.disabled = True

__all__ = [
    "AlgorithmLogger",
    "TableLogger",
    "LineageTreeLogger",
    "Logger",
    "lineage_logger",
    "format_frequencies",
    "format_edge",
    "format_edges",
]
