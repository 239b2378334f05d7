"""
Type compatibility between a loosely-typed template argument and a
typed function parameter.

Rules, first match wins:
  1. parameter has no effective type        → compatible
  2. argument's runtime type is exactly it  → compatible
  3. parameter is numeric and the argument is a number, or text that
     parses as one (finite, for integers)   → compatible
  4. anything else                          → incompatible

Pure and total: never raises, never mutates.
"""
from __future__ import annotations

from typing import Any

from functions.models import ParameterDescriptor, ParameterType
from utils.numbers import (
    is_finite_number, is_numeric_value, parse_number, try_parse_any_number,
)


def is_compatible(parameter: ParameterDescriptor, argument: Any) -> bool:
    effective_type = parameter.effective_type
    if effective_type is None:
        return True

    # nan and infinity have no integer value
    finite_only = effective_type is ParameterType.INTEGER

    if type(argument) is effective_type.python_type:
        return not finite_only or is_finite_number(argument)

    if parameter.is_numeric:
        if is_numeric_value(argument):
            return not finite_only or is_finite_number(argument)
        return _text_is_number(argument, finite_only)

    return False


def _text_is_number(argument: Any, finite_only: bool = False) -> bool:
    if argument is None or isinstance(argument, bool):
        return False
    try:
        text = str(argument)
    except Exception:
        return False
    if not finite_only:
        return try_parse_any_number(text)
    return is_finite_number(parse_number(text))
