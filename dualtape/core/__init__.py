# dualtape/core/__init__.py

"""
Reverse-mode core of dualtape.

Exports:
    Tape             : Append-only arena of Nodes (the Wengert list).
    Node             : One recorded operation: two partials, two parent indices.
    Var              : Handle (tape, index, value) whose operators append to the tape.
    Grad             : Adjoint vector of one reverse pass, queried with `wrt`.
    backprop         : Run a single reverse sweep seeded at a Var.
    reverse_gradient : Convenience: gradient of f at x0 on a fresh tape.
    reverse_jacobian : Convenience: Jacobian of f at x0, one sweep per output.
"""

from .errors import AutodiffError, VariableIndexError, TapeMismatchError, TapeBusyError
from .node import Node
from .var import Var
from .tape import Tape
from .engine import Grad, backprop, reverse_gradient, reverse_jacobian

__all__ = [
    "AutodiffError", "VariableIndexError", "TapeMismatchError", "TapeBusyError",
    "Node", "Var", "Tape",
    "Grad", "backprop", "reverse_gradient", "reverse_jacobian",
]
