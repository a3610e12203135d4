"""
Dense linear solver.

Gaussian elimination with partial pivoting that never raises: a column
whose best pivot is below the tolerance is skipped, and back substitution
leaves the matching unknown at zero.  Singular systems (floating
sub-circuits, batteries shorted by their own terminals) therefore resolve
to zero-valued unknowns instead of an error.
"""

import logging

import numpy as np

from config import PIVOT_TOLERANCE

logger = logging.getLogger(__name__)


def gaussian_elimination(matrix, rhs, tolerance=PIVOT_TOLERANCE) -> np.ndarray:
    """Solve ``matrix @ x = rhs`` without modifying either input."""
    M = np.array(matrix, dtype=float)
    x = np.array(rhs, dtype=float)
    n = len(x)
    if n == 0:
        return np.zeros(0)

    for i in range(n):
        # argmax keeps the first row on ties
        max_row = i + int(np.argmax(np.abs(M[i:, i])))
        if max_row != i:
            M[[i, max_row]] = M[[max_row, i]]
            x[[i, max_row]] = x[[max_row, i]]

        pivot = M[i, i]
        if abs(pivot) < tolerance:
            logger.debug(f"Skipping column {i}: pivot {pivot:.3e} below tolerance")
            continue

        factors = M[i + 1:, i] / pivot
        x[i + 1:] -= factors * x[i]
        M[i + 1:, i:] -= np.outer(factors, M[i, i:])

    result = np.zeros(n)
    for i in range(n - 1, -1, -1):
        total = M[i, i + 1:] @ result[i + 1:]
        if abs(M[i, i]) > tolerance:
            result[i] = (x[i] - total) / M[i, i]
    return result
