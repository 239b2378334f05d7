"""
Argument resolution — turns a template helper call into a validated
parameter binding.

A helper call arrives in one of two shapes:
  - named:      {{ math_add(a=1, b=2) }}  → a mapping
  - positional: {{ math_add(1, 2) }}      → a sequence

Named arguments may be qualified with the function name to disambiguate
when several helpers in one template share parameter names: for the
function "add" with delimiter "_", "add_a" wins over a bare "a".

Binding is all-or-nothing: the full binding is validated first and only
then written into the ExecutionContext, so a failed call leaves the
context exactly as it found it.
"""
from __future__ import annotations

import structlog
from collections.abc import Mapping, Sequence
from typing import Any, Union

from functions.models import FunctionDescriptor
from templates.compatibility import is_compatible
from templates.errors import (
    ArityMismatchError, FunctionHelperError,
    MissingRequiredParameterError, TypeMismatchError,
)

logger = structlog.get_logger()

RawArguments = Union[Mapping[str, Any], Sequence[Any]]


class ExecutionContext(dict):
    """
    Shared name → value store for one render pass.

    Helpers write bound arguments here before invoking a function, and
    functions may leave values behind for later helpers to see. Not
    locked: give each concurrent render its own instance.
    """


# ──────────────────────────────────────────────────────────────
#  Resolution
# ──────────────────────────────────────────────────────────────

def resolve_arguments(
    descriptor: FunctionDescriptor,
    raw_arguments: RawArguments,
    name_delimiter: str,
) -> dict[str, Any]:
    """
    Validate raw call arguments against a descriptor and return the binding.

    Raises MissingRequiredParameterError, TypeMismatchError or
    ArityMismatchError. Never touches any context.
    """
    if not raw_arguments:
        required = descriptor.required_parameters
        if required:
            names = ", ".join(p.name for p in required)
            raise MissingRequiredParameterError(
                descriptor.name, required[0].name,
                message=f"No arguments are provided for {descriptor.name}; required: {names}.",
            )
        return {}

    if isinstance(raw_arguments, Mapping):
        return _resolve_named(descriptor, raw_arguments, name_delimiter)
    return _resolve_positional(descriptor, raw_arguments)


def bind_arguments(
    descriptor: FunctionDescriptor,
    context: ExecutionContext,
    raw_arguments: RawArguments,
    name_delimiter: str,
) -> dict[str, Any]:
    """Resolve, then commit the binding into the context. Context is untouched on failure."""
    try:
        binding = resolve_arguments(descriptor, raw_arguments, name_delimiter)
    except FunctionHelperError as e:
        logger.warning("argument_binding_failed",
                       function=descriptor.qualified_name,
                       parameter=e.parameter_name,
                       error=str(e))
        raise

    context.update(binding)
    return binding


def _resolve_named(
    descriptor: FunctionDescriptor,
    arguments: Mapping[str, Any],
    name_delimiter: str,
) -> dict[str, Any]:
    binding: dict[str, Any] = {}
    for param in descriptor.parameters:
        qualified_key = f"{descriptor.name}{name_delimiter}{param.name}"
        if qualified_key in arguments:
            value = arguments[qualified_key]
        elif param.name in arguments:
            value = arguments[param.name]
        else:
            if param.required:
                raise MissingRequiredParameterError(descriptor.name, param.name)
            continue

        if not is_compatible(param, value):
            raise TypeMismatchError(descriptor.name, param.name, param.type_label, value)
        binding[param.name] = value
    return binding


def _resolve_positional(descriptor: FunctionDescriptor, arguments: Sequence[Any]) -> dict[str, Any]:
    required_count = len(descriptor.required_parameters)
    total = len(descriptor.parameters)
    if not required_count <= len(arguments) <= total:
        raise ArityMismatchError(descriptor.name, len(arguments), required_count, total)

    binding: dict[str, Any] = {}
    for param, value in zip(descriptor.parameters, arguments):
        if not is_compatible(param, value):
            raise TypeMismatchError(descriptor.name, param.name, param.type_label, value)
        binding[param.name] = value
    return binding
