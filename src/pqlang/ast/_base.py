"""Node for base classes."""

__all__ = ["AstNode", "SourcePosition"]

from dataclasses import dataclass


@dataclass
class SourcePosition:
    """Source code position information for AST nodes.

    Tracks where an AST node originated in the source code,
    useful for error messages and debugging.

    Attributes:
        filename: Source file path (e.g., "examples/fact.pq")
        start_line: Starting line number (1-indexed)
        start_column: Starting column number (1-indexed)
        end_line: Ending line number (1-indexed)
        end_column: Ending column number (1-indexed)
    """
    filename: str | None = None
    start_line: int | None = None
    start_column: int | None = None
    end_line: int | None = None
    end_column: int | None = None

    def __str__(self) -> str:
        """Format position for error messages."""
        if self.start_line:
            text = f"on line {self.start_line}"
            if self.filename:
                text += f" of {self.filename}"
            return text
        return ""


class AstNode:
    """Base class for all AST nodes.

    AST nodes are immutable structures that describe how a program runs.
    They are validated on construction and will raise exceptions if invalid.

    Evaluation is a direct recursive walk: `evaluate` receives the current
    `Env` and returns the resulting `Value`. Control signals (Break and
    Return) are returned as ordinary values and handled by the blocks,
    loops and calls that care about them.

    This is a base class that should not be instantiated directly.
    Subclasses must implement evaluate() and unparse().

    Attributes:
        position: Optional source position information (line, column).
                  Set by parser when creating nodes from source code.
    """

    position = None

    def evaluate(self, env):
        """Evaluate this node to produce a Value.

        Args:
            env: (Env) Environments of the current scope

        Returns:
            (Value) Result of the evaluation
        """
        raise NotImplementedError(f"{self.__class__.__name__}.evaluate() not implemented")

    def unparse(self) -> str:
        """Convert this node back to source code.

        Used for debugging and error messages. Produces PQLang source that
        parses back to an equivalent AST.

        Returns:
            Source code string
        """
        raise NotImplementedError(f"{self.__class__.__name__}.unparse() not implemented")


def check_node(owner, field, value):
    """Validate that a node field holds an AstNode."""
    if not isinstance(value, AstNode):
        raise TypeError(f"{owner} {field} must be AstNode, got {type(value)}")


def check_nodes(owner, field, values):
    """Validate that a node field holds a list of AstNodes."""
    if not isinstance(values, list):
        raise TypeError(f"{owner} {field} must be list, got {type(values)}")
    for value in values:
        check_node(owner, field, value)


def check_name(owner, field, value):
    if not isinstance(value, str) or not value:
        raise TypeError(f"{owner} {field} must be a non-empty str, got {value!r}")


def unparse_args(args):
    return ",".join(arg.unparse() for arg in args)
