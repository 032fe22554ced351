# dualtape/__init__.py
# Forward (dual numbers) and reverse (tape) automatic differentiation

from .core.tape import Tape
from .core.node import Node
from .core.var import Var
from .core.engine import Grad, backprop, reverse_gradient, reverse_jacobian
from .core.errors import (
    AutodiffError,
    VariableIndexError,
    TapeMismatchError,
    TapeBusyError,
)

# Forward mode
from . import forward
from .forward import DualScalar, derivative, gradient, jacobian

__version__ = "0.1.0"

__all__ = [
    # Forward
    'DualScalar',
    'derivative',
    'gradient',
    'jacobian',
    # Reverse
    'Tape',
    'Node',
    'Var',
    'Grad',
    'backprop',
    'reverse_gradient',
    'reverse_jacobian',
    # Errors
    'AutodiffError',
    'VariableIndexError',
    'TapeMismatchError',
    'TapeBusyError',
]
