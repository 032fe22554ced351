# dualtape/core/node.py
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Node:
    """
    One entry on the tape produced by a primitive operation.

    Attributes
    ----------
    partials : Tuple[float, float]
        Local partial derivatives (∂out/∂lhs, ∂out/∂rhs).
    parents  : Tuple[int, int]
        Tape indices of (lhs, rhs). Both precede the node's own index,
        except for the self-loop of leaves and of the unused slot of unary
        ops, which always carries a partial of 0.0.
    """
    partials: Tuple[float, float]
    parents: Tuple[int, int]
