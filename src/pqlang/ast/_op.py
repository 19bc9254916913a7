"""Nodes for arithmetic, comparison, and boolean ops."""

__all__ = ["UnaryOp", "BinaryOp"]

import pqlang

from . import _base


class UnaryOp(_base.AstNode):
    """Unary operation: -x, !x, sqrt x, etc.

    The `++` and `--` operators only come from the increment and
    decrement statement shorthands.
    """

    def __init__(self, op: str, operand: _base.AstNode):
        if op not in pqlang.UNARY_OPS:
            raise ValueError(f"UnaryOp requires one of {pqlang.UNARY_OPS}, got {op!r}")
        _base.check_node("UnaryOp", "operand", operand)

        self.op = op
        self.operand = operand

    def evaluate(self, env):
        operand_value = self.operand.evaluate(env)
        return pqlang.unary(self.op, operand_value)

    def unparse(self) -> str:
        if self.op in ("++", "--"):
            return f"({self.operand.unparse()}{self.op[0]}1)"
        if self.op.isalpha():
            return f"{self.op} {self.operand.unparse()}"
        return f"({self.op}{self.operand.unparse()})"

    def __repr__(self):
        return f"UnaryOp({self.op!r}, {self.operand!r})"


class BinaryOp(_base.AstNode):
    """Binary operation: x + y, x == y, x && y, etc.

    Always evaluates both operands, left first (no short-circuiting).
    """

    def __init__(self, op: str, left: _base.AstNode, right: _base.AstNode):
        if op not in pqlang.BINARY_OPS:
            raise ValueError(f"BinaryOp requires one of {pqlang.BINARY_OPS}, got {op!r}")
        _base.check_node("BinaryOp", "left", left)
        _base.check_node("BinaryOp", "right", right)

        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, env):
        left_value = self.left.evaluate(env)
        right_value = self.right.evaluate(env)
        return pqlang.binary(self.op, left_value, right_value)

    def unparse(self) -> str:
        return f"({self.left.unparse()}{self.op}{self.right.unparse()})"

    def __repr__(self):
        return f"BinaryOp({self.op!r}, {self.left!r}, {self.right!r})"
