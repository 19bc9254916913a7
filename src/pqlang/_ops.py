"""Perform builtin operations on Values.

There is a function here for each of the operator nodes. Dispatch is
directed by the variants of the operands. Unsupported combinations raise
`EvalError` naming the operator and the operand types.

Numbers follow IEEE double semantics, dividing by zero produces an
infinity (or nan) instead of failing.
"""

__all__ = [
    "binary",
    "unary",
    "BINARY_OPS",
    "UNARY_OPS",
]

import math

import pqlang


BINARY_OPS = ("||", "&&", "==", "!=", "<", ">", "<=", ">=", "+", "-", "*", "/", "%")
UNARY_OPS = ("!", "-", "+", "++", "--", "sqrt", "floor", "ceil")


def binary(op, left, right):
    """Binary operation on two values.

    Args:
        op: (str) Operator like "+" "==" "&&"
        left: (Value) Left value
        right: (Value) Right value

    Returns:
        (Value) Result of operation

    Raises:
        EvalError: If the operator is not defined for the operand types
    """
    if isinstance(left, pqlang.Number) and isinstance(right, pqlang.Number):
        return _number_binary(op, left, right)

    if isinstance(left, pqlang.Boolean) and isinstance(right, pqlang.Boolean):
        if op == "==":
            return pqlang.Boolean(left.value == right.value)
        if op == "!=":
            return pqlang.Boolean(left.value != right.value)
        if op == "&&":
            return pqlang.Boolean(left.value and right.value)
        if op == "||":
            return pqlang.Boolean(left.value or right.value)
        raise _mismatch(op, left, right)

    if isinstance(left, pqlang.String) or isinstance(right, pqlang.String):
        if op == "+":
            return pqlang.String(str(left) + str(right))
        if isinstance(left, pqlang.String) and isinstance(right, pqlang.String):
            if op == "==":
                return pqlang.Boolean(left.value == right.value)
            if op == "!=":
                return pqlang.Boolean(left.value != right.value)
        elif op == "==":
            return pqlang.Boolean(False)
        raise _mismatch(op, left, right)

    # Values of different kinds are never equal, but every other operator
    # on them is an error.
    if op == "==":
        return pqlang.Boolean(False)
    raise _mismatch(op, left, right)


def unary(op, operand):
    """Unary operation on a value.

    Args:
        op: (str) Operator like "-" "!" "sqrt"
        operand: (Value) Operand value

    Returns:
        (Value) Result of operation

    Raises:
        EvalError: If the operator is not defined for the operand type
    """
    if isinstance(operand, pqlang.Number):
        value = operand.value
        if op == "-":
            return pqlang.Number(-value)
        if op == "+":
            return pqlang.Number(value)
        if op == "++":
            return pqlang.Number(value + 1)
        if op == "--":
            return pqlang.Number(value - 1)
        if op == "sqrt":
            return pqlang.Number(math.sqrt(value) if value >= 0 else math.nan)
        if op == "floor":
            return pqlang.Number(math.floor(value) if math.isfinite(value) else value)
        if op == "ceil":
            return pqlang.Number(math.ceil(value) if math.isfinite(value) else value)

    elif isinstance(operand, pqlang.Boolean):
        if op == "!":
            return pqlang.Boolean(not operand.value)

    raise pqlang.EvalError(f"Operator {op} not valid for {operand.type_name}")


def _number_binary(op, left, right):
    lval = left.value
    rval = right.value

    if op == "+":
        return pqlang.Number(lval + rval)
    if op == "-":
        return pqlang.Number(lval - rval)
    if op == "*":
        return pqlang.Number(lval * rval)
    if op == "/":
        return pqlang.Number(_divide(lval, rval))
    if op == "%":
        return pqlang.Number(_modulo(lval, rval))
    if op == "<":
        return pqlang.Boolean(lval < rval)
    if op == ">":
        return pqlang.Boolean(lval > rval)
    if op == "<=":
        return pqlang.Boolean(lval <= rval)
    if op == ">=":
        return pqlang.Boolean(lval >= rval)
    if op == "==":
        return pqlang.Boolean(lval == rval)
    if op == "!=":
        return pqlang.Boolean(lval != rval)
    raise _mismatch(op, left, right)


def _divide(lval, rval):
    if rval == 0:
        if lval == 0 or math.isnan(lval):
            return math.nan
        return math.copysign(math.inf, lval) * math.copysign(1.0, rval)
    return lval / rval


def _modulo(lval, rval):
    # Truncated remainder, sign follows the dividend
    if rval == 0 or math.isinf(lval):
        return math.nan
    return math.fmod(lval, rval)


def _mismatch(op, left, right):
    return pqlang.EvalError(
        f"Operator {op} not valid for {left.type_name} and {right.type_name}"
    )
