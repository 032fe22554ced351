# dualtape/core/var.py
from __future__ import annotations
import numpy as np

from .errors import TapeMismatchError
from .numeric import ieee, is_scalar


class Var:
    """
    Active variable for reverse-mode AD: a lightweight handle on one tape entry.

    Attributes
    ----------
    tape  : Tape
        The tape this variable was recorded on. The handle does not own it.
    index : int
        Position of the variable's node on the tape.
    value : np.float64
        Forward (primal) value.

    Arithmetic does not compute derivatives; it appends one node holding the
    local partials and returns a new handle. Derivatives are obtained later
    with `backprop()`.
    """
    __slots__ = ("tape", "index", "value")
    __array_ufunc__ = None  # numpy scalars defer to our reflected operators

    def __init__(self, tape, index: int, value):
        if not is_scalar(value):
            raise TypeError(f"Var only accepts real scalars, but got {type(value)}")
        self.tape = tape
        self.index = index
        self.value = np.float64(value)

    def __repr__(self):
        return f"Var(index={self.index}, value={self.value!r})"

    def _check_tape(self, other: Var):
        if other.tape is not self.tape:
            raise TapeMismatchError(
                f"cannot combine variables from {self.tape!r} and {other.tape!r}"
            )

    # ---------- binary ops (Var ∘ Var) and Var ∘ constant ----------
    # Constants become float64 before any arithmetic so that integer
    # numpy types never wrap around.
    def __add__(self, other):
        if isinstance(other, Var):
            self._check_tape(other)
            with ieee():
                value = self.value + other.value
            return self.tape.binary_op(1.0, 1.0, self.index, other.index, value)
        if is_scalar(other):
            with ieee():
                value = self.value + np.float64(other)
            return self.tape.unary_op(1.0, self.index, value)
        return NotImplemented

    def __radd__(self, other):
        if is_scalar(other):
            with ieee():
                value = np.float64(other) + self.value
            return self.tape.unary_op(1.0, self.index, value)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Var):
            self._check_tape(other)
            with ieee():
                value = self.value - other.value
            return self.tape.binary_op(1.0, -1.0, self.index, other.index, value)
        if is_scalar(other):
            with ieee():
                value = self.value - np.float64(other)
            return self.tape.unary_op(1.0, self.index, value)
        return NotImplemented

    def __rsub__(self, other):
        if is_scalar(other):
            with ieee():
                value = np.float64(other) - self.value
            return self.tape.unary_op(-1.0, self.index, value)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Var):
            self._check_tape(other)
            with ieee():
                value = self.value * other.value
            return self.tape.binary_op(other.value, self.value,
                                       self.index, other.index, value)
        if is_scalar(other):
            c = np.float64(other)
            with ieee():
                value = self.value * c
            return self.tape.unary_op(c, self.index, value)
        return NotImplemented

    def __rmul__(self, other):
        # scalar·Var: the scalar itself is the local partial
        if is_scalar(other):
            c = np.float64(other)
            with ieee():
                value = c * self.value
            return self.tape.unary_op(c, self.index, value)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Var):
            self._check_tape(other)
            b = other.value
            with ieee():
                p_lhs, p_rhs = 1.0 / b, -self.value / (b * b)
                value = self.value / b
            return self.tape.binary_op(p_lhs, p_rhs, self.index, other.index, value)
        if is_scalar(other):
            c = np.float64(other)
            with ieee():
                partial, value = 1.0 / c, self.value / c
            return self.tape.unary_op(partial, self.index, value)
        return NotImplemented

    def __rtruediv__(self, other):
        if is_scalar(other):
            c = np.float64(other)
            b = self.value
            with ieee():
                partial, value = -c / (b * b), c / b
            return self.tape.unary_op(partial, self.index, value)
        return NotImplemented

    # ---------- unary ops ----------
    def __neg__(self):
        return self.tape.unary_op(-1.0, self.index, -self.value)

    def __pos__(self):
        return self

    def backprop(self):
        """Run one reverse pass seeded at this variable; returns a Grad."""
        from .engine import backprop
        return backprop(self)
