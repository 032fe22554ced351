# dualtape/core/numeric.py
"""Scalar helpers shared by the forward and reverse engines."""
import numpy as np

_SCALAR_TYPES = (int, float, np.integer, np.floating)


def is_scalar(x) -> bool:
    """True for plain real numbers (bools excluded)."""
    return isinstance(x, _SCALAR_TYPES) and not isinstance(x, (bool, np.bool_))


def ieee():
    """
    Error state under which division by zero, 0/0 and overflow silently
    produce inf / nan, exactly like plain IEEE-754 arithmetic.
    """
    return np.errstate(divide="ignore", invalid="ignore", over="ignore")


def new_matrix(rows: int, cols: int, container=None):
    """
    Create the rows x cols zero-filled matrix that Jacobians are written into.

    `container` is any factory (rows, cols) -> matrix supporting
    `m[row, col] = value`; by default a float64 numpy array.
    """
    if container is None:
        return np.zeros((rows, cols), dtype=np.float64)
    return container(rows, cols)
