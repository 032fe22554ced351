# dualtape/core/engine.py
from __future__ import annotations
import logging
from typing import Callable, List, Sequence

import numpy as np

from .errors import VariableIndexError
from .numeric import new_matrix
from .tape import Tape
from .var import Var

logger = logging.getLogger(__name__)


class Grad:
    """
    Adjoint vector produced by one reverse pass.

    Holds one slot per tape node that existed when `backprop` ran. The
    underlying array is read-only; query it per variable with `wrt`.
    """
    __slots__ = ("tape", "_adjoints")

    def __init__(self, tape: Tape, adjoints):
        arr = np.array(adjoints, dtype=np.float64)
        arr.flags.writeable = False
        self.tape = tape
        self._adjoints = arr

    def __repr__(self):
        return f"Grad(len={len(self._adjoints)}, tape={self.tape!r})"

    def __len__(self):
        return len(self._adjoints)

    @property
    def adjoints(self) -> np.ndarray:
        return self._adjoints

    def wrt(self, var: Var) -> float:
        """
        Adjoint of the backprop output with respect to `var`.

        Raises VariableIndexError when `var` was not recorded on this Grad's
        tape before the reverse pass: a foreign tape, a node appended later,
        or a negative index. Never falls back to 0.0.
        """
        if var.tape is not self.tape:
            raise VariableIndexError(
                f"{var!r} belongs to {var.tape!r}, not to {self.tape!r}"
            )
        if not 0 <= var.index < len(self._adjoints):
            raise VariableIndexError(
                f"variable index {var.index} out of range for Grad of "
                f"length {len(self._adjoints)}"
            )
        return float(self._adjoints[var.index])

    __getitem__ = wrt


def backprop(var: Var) -> Grad:
    """
    Single reverse sweep over the tape, seeded at `var`.

    For i = var.index ... 0:
        adj[parents[0]] += partials[0] * adj[i]
        adj[parents[1]] += partials[1] * adj[i]

    Parents always precede their children, so one reverse linear scan is a
    valid topological order. Nodes recorded after `var` cannot influence it
    and keep a zero adjoint. Self-referencing parent slots carry a zero
    partial and are skipped, so an inf adjoint never turns into 0 * inf = nan
    at a leaf. The tape is only read.
    """
    tape = var.tape
    nodes = tape.nodes
    n = len(nodes)
    if not 0 <= var.index < n:
        raise VariableIndexError(f"variable index {var.index} not on {tape!r}")
    logger.debug("backprop from node %d over %d nodes of %r", var.index, n, tape)

    adjoint = [0.0] * n
    adjoint[var.index] = 1.0  # seed dy/dy = 1
    for i in range(var.index, -1, -1):
        (p0, p1), (j0, j1) = nodes[i].partials, nodes[i].parents
        a = adjoint[i]
        # self-loops (leaves, unused unary slot) are sentinels, not dependencies
        if j0 != i:
            adjoint[j0] += p0 * a
        if j1 != i:
            adjoint[j1] += p1 * a
    return Grad(tape, adjoint)


def reverse_gradient(f: Callable[[Sequence[Var]], Var],
                     x0: Sequence[float]) -> List[float]:
    """
    Gradient of a scalar-output f at x0 using one reverse pass on a fresh tape.

    Example
    -------
    reverse_gradient(lambda xs: xs[0]*xs[1] + xs[1]*xs[1], [1.0, 2.0]) -> [2.0, 5.0]
    """
    tape = Tape(name="reverse_gradient")
    xs = tuple(tape.var(v) for v in x0)
    y = f(xs)
    if not isinstance(y, Var):
        # constant output: nothing depends on the inputs
        return [0.0] * len(xs)
    g = backprop(y)
    return [g.wrt(x) for x in xs]


def reverse_jacobian(f: Callable[[Sequence[Var]], Sequence[Var]],
                     x0: Sequence[float], container=None):
    """
    M x N Jacobian assembled row by row: the graph is recorded once and one
    reverse pass per output yields a full row of partials.
    """
    tape = Tape(name="reverse_jacobian")
    xs = tuple(tape.var(v) for v in x0)
    ys = list(f(xs))
    m, n = len(ys), len(xs)
    logger.debug("reverse jacobian %dx%d over %d nodes", m, n, len(tape))

    jac = new_matrix(m, n, container)
    for row, y in enumerate(ys):
        if not isinstance(y, Var):
            continue
        g = backprop(y)
        for col, x in enumerate(xs):
            jac[row, col] = g.wrt(x)
    return jac
