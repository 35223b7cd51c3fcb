"""Tunable parameters of lineage reconstruction."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LineageConfig:
    """Configuration for constraint network construction and tree search."""

    vaf_error_margin: float = 0.08
    """Baseline allele frequency error margin. Adaptive margins never go below it."""

    all_edges: bool = False
    """Attempt edges between every pair of differing levels, not only adjacent ones."""

    max_grow_calls: int = 10_000_000
    """Cap on recursive calls of the spanning tree search."""

    max_trees: int = 100_000
    """Cap on the number of collected spanning trees."""

    num_trees_for_consistency_check: int = 10
    """Number of top ranked trees passed to the consistency check."""

    solver_tolerance: float = 1e-9
    """Optimality and feasibility tolerance handed to the QP solver."""

    solver_max_iterations: int = 500

    consistency_floor: float = 1e-4
    """Replaces a zero children-sum gap in the consistency constraints."""

    zero_frequency_floor: float = 1e-5
    """Replaces a zero node frequency in the deviation magnitude bound."""

    min_robust_cluster_size: int = 2
    """Membership size at which a merged cluster counts as robust."""

    max_rebuilds: Optional[int] = None
    """Cap on network adjustments during reconstruction (None: until no change)."""

    logger_name: str = "clonearchitect"
