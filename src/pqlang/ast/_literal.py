"""Nodes for literal values, arrays and variable lookup."""

__all__ = ["Literal", "ArrayInit", "Lookup"]

import pqlang

from . import _base


class Literal(_base.AstNode):
    """Embedded constant value.

    Also carries the `break` and `return expr` control signals.
    """

    def __init__(self, value):
        if not isinstance(value, pqlang.Value):
            raise TypeError(f"Literal value must be Value, got {type(value)}")
        self.value = value

    def evaluate(self, env):
        return self.value

    def unparse(self):
        return self.value.format()

    def __repr__(self):
        return f"Literal({self.value!r})"


class ArrayInit(_base.AstNode):
    """New array with a computed size: [n]"""

    def __init__(self, size):
        _base.check_node("ArrayInit", "size", size)
        self.size = size

    def evaluate(self, env):
        size = self.size.evaluate(env)
        if not isinstance(size, pqlang.Number):
            raise pqlang.EvalError(f"Array size was {size.type_name} and has to be a number")
        if not size.is_integer() or size.value < 0:
            raise pqlang.EvalError(f"Array can only be of integer size, got {size}")
        return pqlang.Array(int(size.value))

    def unparse(self):
        return f"[{self.size.unparse()}]"

    def __repr__(self):
        return f"ArrayInit({self.size!r})"


class Lookup(_base.AstNode):
    """Read a variable from the current scope."""

    def __init__(self, name):
        _base.check_name("Lookup", "name", name)
        self.name = name

    def evaluate(self, env):
        try:
            return env.vars[self.name]
        except KeyError:
            raise pqlang.EvalError(f'Variable "{self.name}" does not exist') from None

    def unparse(self):
        return self.name

    def __repr__(self):
        return f"Lookup({self.name!r})"
