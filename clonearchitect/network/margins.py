from __future__ import annotations
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clonearchitect.network.node import Node

# two-sided 95% confidence interval
Z_95 = 1.96


def standard_error(node: Node, sample: int, baseline: float) -> float:
    """Half-width of the 95% confidence interval of ``node``'s frequency in ``sample``.

    The root, sample leaves and clusters without recorded members have no
    statistics of their own and use the fixed baseline margin.
    """
    if node.cluster is None or node.cluster.size == 0:
        return baseline
    return Z_95 * node.std_dev(sample) / math.sqrt(node.cluster.size)


def aaf_error_margin(parent: Node, child: Node, sample: int, baseline: float) -> float:
    """Tolerance for ``child`` exceeding ``parent`` in ``sample``.

    The margin is the sum of both sides' standard errors but never falls below
    the baseline.
    """
    margin = standard_error(parent, sample, baseline) + standard_error(
        child, sample, baseline
    )
    return max(margin, baseline)
