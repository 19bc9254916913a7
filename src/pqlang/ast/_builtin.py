"""Nodes for console I/O and user raised errors."""

__all__ = ["Print", "Read", "Raise"]

import pqlang

from . import _base


class Print(_base.AstNode):
    """Write the textual form of a value as one line: print(expr)"""

    def __init__(self, operand):
        _base.check_node("Print", "operand", operand)
        self.operand = operand

    def evaluate(self, env):
        value = self.operand.evaluate(env)
        env.io.write_line(str(value))
        return pqlang.Void()

    def unparse(self):
        return f"print({self.operand.unparse()})"

    def __repr__(self):
        return f"Print({self.operand!r})"


class Read(_base.AstNode):
    """Read one line of input as a String, empty at end of input."""

    def evaluate(self, env):
        line = env.io.read_line()
        return pqlang.String("" if line is None else line)

    def unparse(self):
        return "read"

    def __repr__(self):
        return "Read()"


class Raise(_base.AstNode):
    """Abort the program with a message: error(expr)"""

    def __init__(self, message):
        _base.check_node("Raise", "message", message)
        self.message = message

    def evaluate(self, env):
        value = self.message.evaluate(env)
        raise pqlang.ProgramError(str(value))

    def unparse(self):
        return f"error({self.message.unparse()})"

    def __repr__(self):
        return f"Raise({self.message!r})"
