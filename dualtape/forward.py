# dualtape/forward.py
# Forward-mode engine on dual numbers (independent from the tape / reverse mode)

import logging
from typing import Callable, List, Sequence

import numpy as np

from .core.numeric import ieee, is_scalar, new_matrix

logger = logging.getLogger(__name__)


class DualScalar:
    """
    Dual number  value + derivative * ε  with ε² = 0.

    `derivative` equals d(value)/d(seed) for whatever seed was planted at
    construction. Instances are never mutated; every operation returns a new
    one (so `a += b` simply rebinds `a`).
    """
    __slots__ = ("_v", "_dv")
    __array_ufunc__ = None

    def __init__(self, value, derivative=0.0):
        self._v = np.float64(value)
        self._dv = np.float64(derivative)

    @property
    def value(self):
        return self._v

    @property
    def derivative(self):
        return self._dv

    def deriv(self) -> float:
        """Derivative part as a plain float."""
        return float(self._dv)

    @classmethod
    def zero(cls):
        return cls(0.0, 0.0)

    def is_zero(self) -> bool:
        return self._v == 0.0

    def __repr__(self):
        return f"(v, dv) = ({self._v!r}, {self._dv!r})"

    # Equality looks at the value only, the derivative depends on the seed.
    def __eq__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return bool(self._v == other._v)

    def __hash__(self):
        return hash(float(self._v))

    def __add__(a, b):
        b = _coerce(b)
        if b is None:
            return NotImplemented
        with ieee():
            return DualScalar(a._v + b._v, a._dv + b._dv)
    __radd__ = __add__

    def __sub__(a, b):
        b = _coerce(b)
        if b is None:
            return NotImplemented
        with ieee():
            return DualScalar(a._v - b._v, a._dv - b._dv)

    def __rsub__(b, a):
        a = _coerce(a)
        if a is None:
            return NotImplemented
        return a - b

    def __mul__(a, b):
        b = _coerce(b)
        if b is None:
            return NotImplemented
        with ieee():
            return DualScalar(a._v * b._v, a._dv * b._v + a._v * b._dv)
    __rmul__ = __mul__

    def __truediv__(a, b):
        b = _coerce(b)
        if b is None:
            return NotImplemented
        # b.v == 0 gives inf / nan, as plain floating point would
        with ieee():
            return DualScalar(a._v / b._v,
                              (a._dv * b._v - a._v * b._dv) / (b._v * b._v))

    def __rtruediv__(b, a):
        a = _coerce(a)
        if a is None:
            return NotImplemented
        return a / b

    def __neg__(a):
        return DualScalar(-a._v, -a._dv)

    def __pos__(a):
        return a


def _coerce(x):
    """Return x as a DualScalar (numbers become constants), or None."""
    if isinstance(x, DualScalar):
        return x
    if is_scalar(x):
        return DualScalar(x)
    return None


def _derivative_of(y) -> float:
    d = _coerce(y)
    if d is None:
        raise TypeError(f"function must return a DualScalar or a number, got {type(y)}")
    return d.deriv()


# ----- Drivers -----
def derivative(f: Callable[[DualScalar], DualScalar], x0: float) -> float:
    """Derivative of f at x0: one evaluation with the seed dx = 1."""
    return _derivative_of(f(DualScalar(x0, 1.0)))


def gradient(f: Callable[[Sequence[DualScalar]], DualScalar],
             x0: Sequence[float]) -> List[float]:
    """
    Gradient of a scalar-output f at x0.

    Each pass sets input i to dv=1 and the others to dv=0, so that the output
    derivative is ∂f/∂x_i. Uses exactly len(x0) evaluations of f.
    """
    inputs = [DualScalar(v) for v in x0]
    partials = []
    for i, v in enumerate(x0):
        inputs[i] = DualScalar(v, 1.0)
        partials.append(_derivative_of(f(tuple(inputs))))
        inputs[i] = DualScalar(v, 0.0)
    logger.debug("forward gradient: %d evaluations", len(partials))
    return partials


def jacobian(f: Callable[[Sequence[DualScalar]], Sequence[DualScalar]],
             x0: Sequence[float], container=None):
    """
    Jacobian of f: R^N -> R^M at x0 as an M-by-N matrix (row = output,
    column = input).

    Column-wise: seeding input i alone gives ∂f_j/∂x_i for every output j in
    one evaluation, so N evaluations fill the whole matrix.

    Args:
        f: Function taking a sequence of N DualScalars, returning M of them
        x0: Point of evaluation
        container: Optional factory (rows, cols) -> zero matrix; numpy by default

    Returns:
        The filled M x N matrix
    """
    inputs = [DualScalar(v) for v in x0]
    n = len(inputs)
    if n == 0:
        return new_matrix(len(list(f(()))), 0, container)

    jac = None
    m = 0
    for col, v in enumerate(x0):
        inputs[col] = DualScalar(v, 1.0)
        outputs = list(f(tuple(inputs)))
        inputs[col] = DualScalar(v, 0.0)
        if jac is None:
            m = len(outputs)
            jac = new_matrix(m, n, container)
        elif len(outputs) != m:
            raise ValueError(
                f"function returned {len(outputs)} outputs, expected {m}"
            )
        for row, y in enumerate(outputs):
            jac[row, col] = _derivative_of(y)
    logger.debug("forward jacobian %dx%d: %d evaluations", m, n, n)
    return jac
