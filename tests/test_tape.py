"""
Tape tests: node layout, append-only growth and exclusive append access.
"""

import warnings

import numpy as np
import pytest

from dualtape import Tape, Node, TapeBusyError, VariableIndexError, TapeMismatchError


def test_leaf_node_self_references():
    tape = Tape()
    x = tape.var(1.5)
    assert x.index == 0
    assert x.value == 1.5
    assert tape[0] == Node(partials=(0.0, 0.0), parents=(0, 0))


def test_binary_op_appends_one_node():
    tape = Tape()
    a = tape.var(1.0)
    b = tape.var(2.0)
    c = tape.binary_op(0.5, -0.25, a.index, b.index, 3.0)
    assert c.index == 2
    assert c.value == 3.0
    assert tape[2] == Node(partials=(0.5, -0.25), parents=(0, 1))


def test_recorded_partials():
    tape = Tape()
    x = tape.var(3.0)
    y = tape.var(2.0)
    cases = [
        (x + y, (1.0, 1.0), (0, 1)),
        (x - y, (1.0, -1.0), (0, 1)),
        (x * y, (2.0, 3.0), (0, 1)),
        (x / y, (0.5, -0.75), (0, 1)),
    ]
    for v, partials, parents in cases:
        assert tape[v.index] == Node(partials=partials, parents=parents)

    n = -x
    assert tape[n.index] == Node(partials=(-1.0, 0.0), parents=(0, n.index))
    s = 4.0 * x
    assert tape[s.index] == Node(partials=(4.0, 0.0), parents=(0, s.index))
    assert s.value == 12.0


def test_operators_with_constants():
    tape = Tape()
    x = tape.var(2.0)
    cases = [
        (x + 1.0, 3.0, 1.0), (1.0 + x, 3.0, 1.0),
        (x - 1.0, 1.0, 1.0), (1.0 - x, -1.0, -1.0),
        (x * 3.0, 6.0, 3.0), (x / 4.0, 0.5, 0.25),
        (8.0 / x, 4.0, -2.0),
    ]
    for v, value, partial in cases:
        assert v.value == value
        assert tape[v.index].partials == (partial, 0.0)
        assert tape[v.index].parents == (0, v.index)


def test_append_only_length_and_history():
    tape = Tape()
    x = tape.var(1.0)
    y = tape.var(2.0)
    z = tape.var(3.0)
    w = x * y + z  # 2 ops
    before = tape.nodes
    assert len(tape) == 3 + 2

    w = w / x - y * 2.0  # 3 ops
    w = -w  # 1 op
    assert len(tape) == 3 + 6
    # earlier entries unchanged
    assert tape.nodes[:len(before)] == before
    # the Grad pass only reads
    snapshot = tape.nodes
    w.backprop()
    assert tape.nodes == snapshot


def test_nodes_are_frozen():
    tape = Tape()
    tape.var(1.0)
    with pytest.raises(Exception):
        tape[0].partials = (1.0, 1.0)
    assert isinstance(tape.nodes, tuple)


def test_parents_must_precede():
    tape = Tape()
    tape.var(1.0)
    tape.var(2.0)
    with pytest.raises(VariableIndexError):
        tape.binary_op(1.0, 1.0, 0, 5, 0.0)
    # self-loop only allowed with a zero partial
    with pytest.raises(VariableIndexError):
        tape.binary_op(1.0, 1.0, 0, 2, 0.0)
    assert len(tape) == 2


def test_append_while_busy_fails_fast():
    tape = Tape()
    x = tape.var(1.0)
    y = tape.var(2.0)
    with tape._exclusive():
        with pytest.raises(TapeBusyError):
            tape.var(3.0)
        with pytest.raises(TapeBusyError):
            x + y
    assert len(tape) == 2
    # released afterwards
    x * y
    assert len(tape) == 3


def test_reentrant_append_during_append():
    tape = Tape()
    x = tape.var(1.0)
    y = tape.var(2.0)

    class Partial:
        # converting the partial tries to record on the same tape
        def __float__(self):
            tape.var(0.0)
            return 1.0

    with pytest.raises(TapeBusyError):
        tape.binary_op(Partial(), 1.0, x.index, y.index, 3.0)
    assert len(tape) == 2


def test_mixing_tapes_is_rejected():
    t1, t2 = Tape(name="a"), Tape(name="b")
    x = t1.var(1.0)
    y = t2.var(1.0)
    with pytest.raises(TapeMismatchError):
        x + y
    with pytest.raises(TapeMismatchError):
        x * y
    assert len(t1) == 1 and len(t2) == 1


def test_var_rejects_non_numbers():
    tape = Tape()
    with pytest.raises(TypeError):
        tape.var("1.0")
    x = tape.var(1.0)
    with pytest.raises(TypeError):
        x + "a"
    assert "a" in repr(Tape(name="a"))


def test_numpy_scalar_constants():
    tape = Tape()
    x = tape.var(2.0)
    y = np.float64(3.0) * x
    assert y.value == 6.0
    assert tape[y.index].partials == (3.0, 0.0)


@pytest.mark.parametrize("c", [np.uint8(2), np.uint64(2), np.int8(2), 2])
def test_integer_constants_divided_by_var(c):
    tape = Tape()
    x = tape.var(2.0)
    y = c / x
    assert y.value == 1.0
    assert tape[y.index].partials == (-0.5, 0.0)
    assert y.backprop().wrt(x) == -0.5


@pytest.mark.parametrize("c", [np.uint8(3), np.uint64(3)])
def test_unsigned_constants_in_other_ops(c):
    tape = Tape()
    x = tape.var(2.0)
    assert (c - x).value == 1.0
    assert (x - c).value == -1.0
    assert tape[(c * x).index].partials == (3.0, 0.0)
    assert (x / c).backprop().wrt(x) == pytest.approx(1.0 / 3.0)


def test_degenerate_var_arithmetic_is_silent():
    tape = Tape()
    big = tape.var(1e200)
    inf = tape.var(float("inf"))
    zero = tape.var(0.0)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert np.isinf((big * big).value)
        assert np.isinf((big * 1e200).value)
        assert np.isinf((1e200 * big).value)
        assert np.isinf((big + 1e308 + 1e308).value)
        assert np.isnan((inf - inf).value)
        assert np.isnan((inf + -np.inf).value)
        assert np.isnan((zero / zero).value)
        assert np.isinf((1.0 / zero).value)
        grad = (big * big).backprop()
        assert grad.wrt(big) == 2e200
