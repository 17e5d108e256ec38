"""Runtime value model.

Lox values map onto Python natives: Number is ``float``, String is
``str``, True/False are ``bool`` and Nil is ``None``. Because Python
treats ``True == 1.0`` as equal, comparisons go through
:func:`values_equal`, which never equates values of different kinds.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Union

Value = Union[float, str, bool, None]


def kind_of(value: Value) -> str:
    """Name of the value's variant, as used in runtime error messages."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float):
        return "number"
    return "string"


def is_truthy(value: Value) -> bool:
    return value is not None and value is not False


def values_equal(left: Value, right: Value) -> bool:
    if kind_of(left) != kind_of(right):
        return False
    return left == right


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    # Shortest round-trip digits, never in exponent notation; keeps "-0"
    digits = Decimal(repr(value))
    if value.is_integer():
        digits = digits.to_integral_value()
    return format(digits, "f")


def stringify(value: Value) -> str:
    """Text written by ``print`` for a value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return value
