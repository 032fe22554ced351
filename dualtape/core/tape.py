# dualtape/core/tape.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from .errors import TapeBusyError, VariableIndexError
from .node import Node
from .var import Var

logger = logging.getLogger(__name__)


class Tape:
    """
    Append-only record of Nodes in forward order (a Wengert list).

    Every Var derived from a tape points back to it; the nodes themselves
    only store indices, so the graph has no cycles and no shared ownership.
    Entries are never altered or removed once appended.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._nodes: List[Node] = []
        self._busy = False
        logger.debug("created tape %r", self)

    def __repr__(self):
        label = f"{self.name!r}, " if self.name is not None else ""
        return f"Tape({label}len={len(self._nodes)})"

    def __len__(self):
        return len(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    @property
    def nodes(self) -> Tuple[Node, ...]:
        """Read-only snapshot of the recorded nodes."""
        return tuple(self._nodes)

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """
        Hold momentary exclusive write access to the node list.

        A second entry while the first is still open (e.g. an operator
        re-entering the tape in the middle of an append) raises
        TapeBusyError instead of interleaving writes.
        """
        if self._busy:
            raise TapeBusyError(f"{self!r} is already being appended to")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def var(self, value) -> Var:
        """Record an input (leaf) variable and return its handle."""
        with self._exclusive():
            index = len(self._nodes)
            var = Var(self, index, value)
            self._nodes.append(Node(partials=(0.0, 0.0), parents=(index, index)))
        return var

    def binary_op(self, p_lhs, p_rhs, lhs_idx: int, rhs_idx: int, new_value) -> Var:
        """
        Append Node{partials: [p_lhs, p_rhs], parents: [lhs_idx, rhs_idx]}.

        This is the single mechanism through which every operator records
        itself. A parent index equal to the new node's own index is only
        accepted with a zero partial (the unused slot of a unary op).
        """
        with self._exclusive():
            index = len(self._nodes)
            _check_parent(lhs_idx, p_lhs, index)
            _check_parent(rhs_idx, p_rhs, index)
            var = Var(self, index, new_value)
            self._nodes.append(Node(partials=(float(p_lhs), float(p_rhs)),
                                    parents=(lhs_idx, rhs_idx)))
        return var

    def unary_op(self, partial, idx: int, new_value) -> Var:
        """Record a one-argument op; the second slot is a zero-weight self-loop."""
        return self.binary_op(partial, 0.0, idx, len(self._nodes), new_value)


def _check_parent(idx: int, partial, index: int):
    if 0 <= idx < index:
        return
    if idx == index and partial == 0.0:
        return
    raise VariableIndexError(
        f"parent index {idx} does not precede new node {index}"
    )
