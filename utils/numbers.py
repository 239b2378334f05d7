"""
Numeric helpers shared by the type compatibility checker and function
argument conversion.

Template arguments are loosely typed: a number may arrive as an int, a
float, or as text like "3" or "2.5e3". These helpers answer "is this a
number?" without ever raising.
"""
from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, Optional, Union

NUMERIC_TYPES: tuple[type, ...] = (int, float, Decimal, Fraction)


def is_numeric_type(value_type: Optional[type]) -> bool:
    """True for Python numeric types. bool is an int subclass but is not numeric here."""
    if value_type is None or value_type is bool:
        return False
    return issubclass(value_type, NUMERIC_TYPES)


def is_numeric_value(value: Any) -> bool:
    return is_numeric_type(type(value))


def is_finite_number(value: Any) -> bool:
    """False for nan and infinities, and for anything that is not a number."""
    if isinstance(value, Decimal):
        return value.is_finite()
    if not is_numeric_value(value):
        return False
    return math.isfinite(value)


def try_parse_any_number(text: Optional[str]) -> bool:
    """True if the text parses as an integer, float, or decimal literal."""
    return parse_number(text) is not None


def parse_number(text: Optional[str]) -> Optional[Union[int, float, Decimal]]:
    """Parse text as the narrowest number it can be. Returns None when it is not a number."""
    if text is None:
        return None
    candidate = str(text).strip()
    if not candidate or "_" in candidate:
        return None
    try:
        return int(candidate)
    except ValueError:
        pass
    try:
        return float(candidate)
    except ValueError:
        pass
    try:
        return Decimal(candidate)
    except (InvalidOperation, ValueError):
        return None
