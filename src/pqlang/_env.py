"""Name environments threaded through evaluation."""

__all__ = ["Env"]


class Env:
    """Variable, function and class environments of one scope.

    Nested scopes work on a `copy()`. The dictionaries are copied but the
    value boxes inside them are shared, so only new bindings and rebindings
    to a different variant stay private to the nested scope.

    Args:
        vars: (dict | None) Name to Value
        funcs: (dict | None) Name to FunctionDef
        classes: (dict | None) Name to ClassDef
        io: Line oriented console collaborator used by print and read

    Attributes:
        vars: (dict) Name to Value
        funcs: (dict) Name to FunctionDef
        classes: (dict) Name to ClassDef
        io: Console collaborator, shared by all copies
    """
    __slots__ = ("vars", "funcs", "classes", "io")

    def __init__(self, vars=None, funcs=None, classes=None, io=None):
        self.vars = {} if vars is None else vars
        self.funcs = {} if funcs is None else funcs
        self.classes = {} if classes is None else classes
        self.io = io

    def copy(self):
        """Environment for a nested scope."""
        return Env(dict(self.vars), dict(self.funcs), dict(self.classes), self.io)

    def __repr__(self):
        return (
            f"Env<vars={sorted(self.vars)} funcs={sorted(self.funcs)} "
            f"classes={sorted(self.classes)}>"
        )
