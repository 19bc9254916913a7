"""Tests for runtime values"""

import math

import pytest

import pqlang
import pqtest


@pqtest.params(
    "value text",
    integral=(pqlang.Number(7), "7"),
    negative=(pqlang.Number(-3), "-3"),
    fraction=(pqlang.Number(2.5), "2.5"),
    true=(pqlang.Boolean(True), "true"),
    false=(pqlang.Boolean(False), "false"),
    string=(pqlang.String("hi"), "hi"),
    void=(pqlang.Void(), "void"),
    brk=(pqlang.Break(), "break"),
    array=(pqlang.Array([pqlang.Number(1), None, pqlang.String("a")]), "(1, void, a)"),
)
def test_text(key, value, text):
    assert str(value) == text


def test_format_quotes_strings():
    assert pqlang.String('a"b').format() == '"a\\"b"'
    assert pqlang.Number(3).format() == "3"


def test_object_text():
    obj = pqlang.Object("Point", {"x": pqlang.Number(1), "y": pqlang.Number(2)}, {}, {})
    assert str(obj) == "Point(x=1, y=2)"


def test_cyclic_array_text():
    array = pqlang.Array(2)
    array.slots[0] = array.copy()
    assert str(array) == "(..., void)"


def test_scalar_copy_is_independent():
    number = pqlang.Number(1)
    other = number.copy()
    other.mutate(pqlang.Number(5))
    assert number.value == 1
    assert other.value == 5


def test_array_copy_shares_slots():
    array = pqlang.Array(2)
    alias = array.copy()
    alias.slots[0] = pqlang.Number(9)
    assert array.get(0).value == 9
    assert isinstance(array.get(1), pqlang.Void)


def test_array_mutate_adopts_slots():
    array = pqlang.Array(1)
    other = pqlang.Array([pqlang.Number(4), pqlang.Number(5)])
    array.mutate(other)
    assert len(array) == 2
    assert array.slots is other.slots


def test_mutate_type_mismatch():
    with pytest.raises(pqlang.EvalError, match="Type mismatch. Expected Number but got String"):
        pqlang.Number(1).mutate(pqlang.String("x"))


def test_control_signals():
    ret = pqlang.Return(pqlang.ast.Literal(pqlang.Number(1)))
    with pytest.raises(pqlang.EvalError):
        ret.copy()
    with pytest.raises(pqlang.EvalError):
        ret.mutate(ret)
    with pytest.raises(pqlang.EvalError):
        pqlang.Break().mutate(pqlang.Break())
    assert str(ret) == "return 1"


@pqtest.params(
    "data expected",
    none=(None, None),
    boolean=(True, True),
    integer=(3, 3.0),
    text=("s", "s"),
    nested=([1, [True, "a"]], [1.0, [True, "a"]]),
)
def test_python_conversion(key, data, expected):
    assert pqlang.Value.from_python(data).to_python() == expected


def test_from_python_rejects_unknown():
    with pytest.raises(TypeError):
        pqlang.Value.from_python({"a": 1})


def test_number_is_integer():
    assert pqlang.Number(4.0).is_integer()
    assert not pqlang.Number(4.5).is_integer()
    assert str(pqlang.Number(math.inf)) == "inf"
