"""Nodes for assignment and array element access.

Assignment follows the mutate-or-replace rule. If the name (or array slot)
already holds a value of the same variant, that value is mutated in place
and every scope sharing it sees the change. Otherwise the binding is
replaced with a copy of the new value.
"""

__all__ = ["Assign", "IndexGet", "IndexSet", "bind"]

import pqlang

from . import _base


def bind(vars, name, value):
    """Assign a value to a name in a variable environment.

    Args:
        vars: (dict) Variable environment to modify
        name: (str) Variable name
        value: (Value) New value
    Raises:
        EvalError: If the value is a control signal
    """
    _check_storable(value, f'"{name}"')
    current = vars.get(name)
    if current is not None and type(current) is type(value):
        current.mutate(value)
    else:
        vars[name] = value.copy()


def _check_storable(value, target):
    if isinstance(value, (pqlang.Break, pqlang.Return)):
        raise pqlang.EvalError(f"Cannot assign {value.type_name} to {target}")


def _lookup_array(target, env):
    array = target.evaluate(env)
    if not isinstance(array, pqlang.Array):
        raise pqlang.EvalError(
            f"{target.unparse()} is {array.type_name} and can not be accessed as an array"
        )
    return array


def _lookup_index(index, env):
    value = index.evaluate(env)
    if not isinstance(value, pqlang.Number):
        raise pqlang.EvalError(f"Index was {value.type_name} and has to be a number")
    if not value.is_integer():
        raise pqlang.EvalError(f"Index was {value} and has to be an integer")
    return int(value.value)


def _check_bounds(array, index):
    if not 0 <= index < len(array):
        raise pqlang.EvalError(f"Index {index} was out of bounds")


class Assign(_base.AstNode):
    """Variable assignment: name=value"""

    def __init__(self, name, value):
        _base.check_name("Assign", "name", name)
        _base.check_node("Assign", "value", value)
        self.name = name
        self.value = value

    def evaluate(self, env):
        bind(env.vars, self.name, self.value.evaluate(env))
        return pqlang.Void()

    def unparse(self):
        return f"{self.name}={self.value.unparse()}"

    def __repr__(self):
        return f"Assign({self.name!r}, {self.value!r})"


class IndexGet(_base.AstNode):
    """Array element read: target[index]"""

    def __init__(self, target, index):
        _base.check_node("IndexGet", "target", target)
        _base.check_node("IndexGet", "index", index)
        self.target = target
        self.index = index

    def evaluate(self, env):
        array = _lookup_array(self.target, env)
        index = _lookup_index(self.index, env)
        _check_bounds(array, index)
        return array.get(index)

    def unparse(self):
        return f"{self.target.unparse()}[{self.index.unparse()}]"

    def __repr__(self):
        return f"IndexGet({self.target!r}, {self.index!r})"


class IndexSet(_base.AstNode):
    """Array element write: target[index]=value"""

    def __init__(self, target, index, value):
        _base.check_node("IndexSet", "target", target)
        _base.check_node("IndexSet", "index", index)
        _base.check_node("IndexSet", "value", value)
        self.target = target
        self.index = index
        self.value = value

    def evaluate(self, env):
        array = _lookup_array(self.target, env)
        index = _lookup_index(self.index, env)
        value = self.value.evaluate(env)
        _check_bounds(array, index)
        _check_storable(value, f"{self.target.unparse()}[{index}]")

        current = array.slots[index]
        if current is not None and type(current) is type(value):
            current.mutate(value)
        else:
            array.slots[index] = value.copy()
        return pqlang.Void()

    def unparse(self):
        return f"{self.target.unparse()}[{self.index.unparse()}]={self.value.unparse()}"

    def __repr__(self):
        return f"IndexSet({self.target!r}, {self.index!r}, {self.value!r})"
