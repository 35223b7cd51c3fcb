"""
Custom exceptions for lineage reconstruction.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
    from clonearchitect.network.node import Node


class CloneArchitectError(Exception):
    """Base exception for lineage reconstruction errors."""

    pass


class EdgeContractError(CloneArchitectError):
    """Raised when the edge admissibility test is called with misordered nodes."""

    @staticmethod
    def raise_level_order(n1: Node, n2: Node) -> NoReturn:
        """
        Raises an EdgeContractError for an edge test whose first node sits
        strictly below the second one.

        Args:
            n1: The node expected to be at an equal or higher level
            n2: The node expected to be at an equal or lower level

        Raises:
            EdgeContractError: Always raised with both levels in the message
        """
        from clonearchitect.logger import lineage_logger

        message = (
            f"Edge test requires level(n1) >= level(n2), got node {n1.node_id} "
            f"at level {n1.level} and node {n2.node_id} at level {n2.level}."
        )
        if not lineage_logger.disabled:
            lineage_logger.error(message)
        raise EdgeContractError(message)


class NetworkAdjustmentError(CloneArchitectError):
    """Raised when a network adjustment cannot be applied to the given nodes."""

    pass


class InputFormatError(CloneArchitectError):
    """Raised when group/cluster input does not match the sample layout."""

    pass
