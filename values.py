import math
from decimal import Decimal
from enum import Enum


# Integers are unsigned 64-bit.
INT_MIN = 0
INT_MAX = 2**64 - 1


class ValueKind(Enum):
    BOOL = "Bool"
    INT = "Int"
    FLOAT = "Float"
    STRING = "String"


def value_kind(value) -> ValueKind:
    # bool first: True is an int to Python, never to the VM
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    raise TypeError(f"not a VM value: {value!r}")


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def int_in_range(n: int) -> bool:
    return INT_MIN <= n <= INT_MAX


def values_equal(a, b) -> bool:
    """Structural equality: values of different kinds are never equal."""
    if value_kind(a) is not value_kind(b):
        return False
    return a == b


def format_float(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x.is_integer():
        if x == 0 and math.copysign(1.0, x) < 0:
            return "-0"
        return str(int(x))
    # shortest round-trip digits, spelled out without an exponent
    return format(Decimal(repr(x)), "f")


def format_value(value) -> str:
    kind = value_kind(value)
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.INT:
        return str(value)
    if kind is ValueKind.FLOAT:
        return format_float(value)
    return value


def escape_text(s: str) -> str:
    return (
        s.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def debug_repr(value) -> str:
    """Tagged form used by the debug trace, e.g. Int(3) or String("hi")."""
    kind = value_kind(value)
    if kind is ValueKind.BOOL:
        inner = "true" if value else "false"
    elif kind is ValueKind.INT:
        inner = str(value)
    elif kind is ValueKind.FLOAT:
        inner = repr(value)
    else:
        inner = f'"{escape_text(value)}"'
    return f"{kind.value}({inner})"
