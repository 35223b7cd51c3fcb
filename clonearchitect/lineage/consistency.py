"""
Global frequency consistency check of lineage trees.

For a tree with ``n`` nodes over ``S`` samples there is one deviation term
``eps`` per (node, sample), stored at index ``sample * n + node``. The check
minimizes ``sum(eps ** 2)`` subject to ``A @ eps <= b`` where the rows of ``A``
encode:

1. children-sum: ``sum(eps_child) - eps_node <= f_node - sum(f_child)``, i.e.
   the adjusted parent frequency covers its adjusted children,
2. absolute value: ``eps <= margin`` and ``-eps <= margin``,
3. magnitude: ``eps <= f_node``.

A feasible solution overwrites the tree's error score with ``sum(eps ** 2)``.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import minimize

from clonearchitect.config import LineageConfig
from clonearchitect.lineage.tree import LineageTree
from clonearchitect.lineage.types import ConsistencyReport
from clonearchitect.logger import lineage_logger
from clonearchitect.network.node import Node


class ConsistencyValidator:
    """
    Poses and solves the consistency QP of lineage trees.

    Usage:
        validator = ConsistencyValidator(config)
        report = validator.validate(tree)
    """

    def __init__(self, config: Optional[LineageConfig] = None):
        self.config = config or LineageConfig()

    def build_constraints(
        self, tree: LineageTree
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Build the linear inequality system ``A @ eps <= b`` for a tree.

        Returns:
            ``(A, b)`` with ``4 * n * S`` rows and ``n * S`` columns.
        """
        nodes = tree.nodes
        n = len(nodes)
        num_samples = len(tree.root.frequencies)
        n_vars = n * num_samples
        floor = self.config.consistency_floor
        margin = self.config.vaf_error_margin

        index: Dict[Node, int] = {node: i for i, node in enumerate(nodes)}
        a = np.zeros((4 * n_vars, n_vars))
        b = np.full(4 * n_vars, floor)

        # sum of children
        for j in range(num_samples):
            for i, node in enumerate(nodes):
                children = tree.children(node)
                if not children:
                    continue
                row = i * num_samples + j
                gap = node.aaf(j) - sum(c.aaf(j) for c in children)
                b[row] = gap if gap != 0 else floor
                for child in children:
                    a[row, n * j + index[child]] = 1.0
                a[row, n * j + i] = -1.0

        # absolute value
        for v in range(n_vars):
            a[n_vars + v, v] = 1.0
            a[2 * n_vars + v, v] = -1.0
            b[n_vars + v] = margin
            b[2 * n_vars + v] = margin

        # magnitude
        for j in range(num_samples):
            for i, node in enumerate(nodes):
                row = 3 * n_vars + i * num_samples + j
                a[row, n * j + i] = 1.0
                b[row] = node.aaf(j) if node.aaf(j) != 0 else self.config.zero_frequency_floor

        return a, b

    def solve(
        self, a: NDArray[np.float64], b: NDArray[np.float64]
    ) -> Tuple[Optional[NDArray[np.float64]], str]:
        """
        Minimize ``eps @ eps`` subject to ``a @ eps <= b``.

        Returns:
            The solution vector, or ``None`` with the solver message when the
            problem is infeasible or the solver fails.
        """
        n_vars = a.shape[1]
        tol = self.config.solver_tolerance
        result = minimize(
            lambda x: float(x @ x),
            np.zeros(n_vars),
            jac=lambda x: 2.0 * x,
            method="SLSQP",
            constraints=[
                {"type": "ineq", "fun": lambda x: b - a @ x, "jac": lambda x: -a}
            ],
            tol=tol,
            options={"maxiter": self.config.solver_max_iterations},
        )
        if not result.success:
            return None, str(result.message)
        violation = float(np.max(a @ result.x - b, initial=0.0))
        # SLSQP reports success on its own tolerance; recheck feasibility
        if violation > max(tol, 1e-7):
            return None, f"constraint violation {violation:.3g}"
        return result.x, str(result.message)

    def validate(self, tree: LineageTree) -> ConsistencyReport:
        """
        Run the consistency check on one tree.

        Solver failures are reported, never raised. On success the tree's
        error score is overwritten with the sum of squared deviations.
        """
        a, b = self.build_constraints(tree)
        try:
            epsilon, message = self.solve(a, b)
        except Exception as e:
            if not lineage_logger.disabled:
                lineage_logger.warning(f"Consistency check raised: {e}")
            return ConsistencyReport(feasible=False, message=str(e))

        if epsilon is None:
            if not lineage_logger.disabled:
                lineage_logger.debug(f"Consistency check failed: {message}")
            return ConsistencyReport(feasible=False, message=message)

        tree.error_score = float(np.sum(epsilon**2))
        return ConsistencyReport(feasible=True, score=tree.error_score, message=message)

    def validate_all(self, trees: Sequence[LineageTree]) -> List[ConsistencyReport]:
        return [self.validate(t) for t in trees]
