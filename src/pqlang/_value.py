"""Runtime values for the evaluator.

Every expression evaluates to one of a closed set of value variants. Each
variant is a small mutable box. Assignment either mutates an existing box in
place (same variant) or binds a fresh copy (different variant or new name),
see `pqlang.ast.Assign`.

Number, Boolean, String and Void copies are independent. Array and Object
are handles: their copies share the same slots or environments, so element
and field mutation is visible through every alias.

Break and Return are control signals. They flow through evaluation as
ordinary values but can never be stored.
"""

__all__ = [
    "Value",
    "Number",
    "Boolean",
    "String",
    "Array",
    "Object",
    "Void",
    "Break",
    "Return",
]

import pqlang


class Value:
    """Base class of all runtime values.

    Attributes:
        type_name: (str) Variant name reported by `.type` and in errors
    """
    __slots__ = ()
    type_name = "Value"

    def copy(self):
        """Create a value suitable for binding to a new name."""
        raise NotImplementedError(f"{self.__class__.__name__}.copy() not implemented")

    def mutate(self, other):
        """Overwrite this value in place with another of the same variant."""
        raise NotImplementedError(f"{self.__class__.__name__}.mutate() not implemented")

    def format(self):
        """Convert value to a PQLang literal expression.

        Strings are quoted, all other values use their textual form.

        Returns:
            (str) String representation suitable for display
        """
        return str(self)

    def to_python(self):
        """Convert this value to a Python equivalent."""
        return self

    @staticmethod
    def from_python(data):
        """Create a runtime value from a plain Python object.

        Args:
            data: bool, int, float, str, None, list/tuple or Value
        Returns:
            (Value) Converted value
        """
        if isinstance(data, Value):
            return data
        if data is None:
            return Void()
        if isinstance(data, bool):
            return Boolean(data)
        if isinstance(data, (int, float)):
            return Number(data)
        if isinstance(data, str):
            return String(data)
        if isinstance(data, (list, tuple)):
            return Array([Value.from_python(item) for item in data])
        raise TypeError(f"Cannot convert {type(data).__name__} to a value")

    def _check_variant(self, other):
        if type(other) is not type(self):
            raise pqlang.EvalError(
                f"Type mismatch. Expected {self.type_name} but got {other.type_name}"
            )

    def _text(self, seen):
        return str(self)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.format()})"


class Number(Value):
    """Double precision number, integral or fractional."""
    __slots__ = ("value",)
    type_name = "Number"

    def __init__(self, value):
        self.value = float(value)

    def copy(self):
        return Number(self.value)

    def mutate(self, other):
        self._check_variant(other)
        self.value = other.value

    def is_integer(self):
        """(bool) True if the number has no fractional part."""
        return self.value.is_integer()

    def to_python(self):
        return self.value

    def __str__(self):
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)


class Boolean(Value):
    __slots__ = ("value",)
    type_name = "Boolean"

    def __init__(self, value):
        self.value = bool(value)

    def copy(self):
        return Boolean(self.value)

    def mutate(self, other):
        self._check_variant(other)
        self.value = other.value

    def to_python(self):
        return self.value

    def __str__(self):
        return "true" if self.value else "false"


class String(Value):
    __slots__ = ("value",)
    type_name = "String"

    def __init__(self, value):
        self.value = str(value)

    def copy(self):
        return String(self.value)

    def mutate(self, other):
        self._check_variant(other)
        self.value = other.value

    def format(self):
        value = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{value}"'

    def to_python(self):
        return self.value

    def __str__(self):
        return self.value


class Array(Value):
    """Fixed length sequence of values.

    Slots start out unset (None) and read back as Void.

    Args:
        slots: (list | int) Existing slot list to share, or a length
    """
    __slots__ = ("slots",)
    type_name = "Array"

    def __init__(self, slots):
        if isinstance(slots, int):
            slots = [None] * slots
        self.slots = slots

    def copy(self):
        return Array(self.slots)

    def mutate(self, other):
        self._check_variant(other)
        self.slots = other.slots

    def __len__(self):
        return len(self.slots)

    def get(self, index):
        """Read a slot, unset slots are Void."""
        value = self.slots[index]
        return Void() if value is None else value

    def to_python(self):
        return [None if v is None else v.to_python() for v in self.slots]

    def _text(self, seen):
        if id(self.slots) in seen:
            return "..."
        seen = seen | {id(self.slots)}
        items = ("void" if v is None else v._text(seen) for v in self.slots)
        return "(" + ", ".join(items) + ")"

    def __str__(self):
        return self._text(frozenset())


class Object(Value):
    """Instance of a user defined class.

    The instance owns its variable and function environments. The class
    map holds the defining class's siblings plus the classes nested in its
    body.

    Args:
        class_name: (str) Name of the instantiated class
        vars: (dict) Field values by name
        funcs: (dict) Methods (FunctionDef nodes) by name
        classes: (dict) Classes visible to the instance's methods
    """
    __slots__ = ("class_name", "vars", "funcs", "classes")
    type_name = "Object"

    def __init__(self, class_name, vars, funcs, classes):
        self.class_name = class_name
        self.vars = vars
        self.funcs = funcs
        self.classes = classes

    def copy(self):
        return Object(self.class_name, self.vars, self.funcs, self.classes)

    def mutate(self, other):
        self._check_variant(other)
        self.class_name = other.class_name
        self.vars = other.vars
        self.funcs = other.funcs
        self.classes = other.classes

    def to_python(self):
        return {name: value.to_python() for name, value in self.vars.items()}

    def _text(self, seen):
        if id(self.vars) in seen:
            return "..."
        seen = seen | {id(self.vars)}
        fields = ", ".join(f"{k}={v._text(seen)}" for k, v in self.vars.items())
        return f"{self.class_name}({fields})"

    def __str__(self):
        return self._text(frozenset())


class Void(Value):
    """Absence of a value."""
    __slots__ = ()
    type_name = "Void"

    def copy(self):
        return Void()

    def mutate(self, other):
        self._check_variant(other)

    def to_python(self):
        return None

    def __str__(self):
        return "void"


class Break(Value):
    """Signal that ends the nearest enclosing loop."""
    __slots__ = ()
    type_name = "Break"

    def copy(self):
        return Break()

    def mutate(self, other):
        raise pqlang.EvalError('Not possible to mutate "Break"')

    def __str__(self):
        return "break"


class Return(Value):
    """Signal that ends the nearest function body.

    Args:
        expr: (AstNode) Expression producing the returned value
    """
    __slots__ = ("expr",)
    type_name = "Return"

    def __init__(self, expr):
        self.expr = expr

    def copy(self):
        raise pqlang.EvalError('Not possible to copy "Return"')

    def mutate(self, other):
        raise pqlang.EvalError('Not possible to mutate "Return"')

    def __str__(self):
        return f"return {self.expr.unparse()}"

    def __repr__(self):
        return f"Return({self.expr!r})"
