"""
Function helpers — expose registry functions as template helpers.

Each descriptor becomes one FunctionHelper registered with the template
engine under "<plugin><delimiter><function>", e.g. math_add. When the
template calls it:

    {{ math_add(a=1, b="2") }}   → named binding
    {{ math_add(1, "2") }}       → positional binding

the helper binds the arguments into the shared ExecutionContext, invokes
the function, and returns the (unwrapped) result to the template. Any
failure propagates and aborts the render.
"""
from __future__ import annotations

import structlog
from collections.abc import Iterable
from typing import Any, Callable, Protocol

from functions.models import FunctionDescriptor
from templates.arguments import ExecutionContext, RawArguments, bind_arguments
from templates.errors import ArityMismatchError, DuplicateRegistrationError
from templates.invoker import FunctionInvoker

logger = structlog.get_logger()


class HelperHost(Protocol):
    """The template engine's helper-registration primitive."""

    def register_helper(self, name: str, helper: Callable[..., Any]) -> None: ...

    def has_helper(self, name: str) -> bool: ...


class FunctionHelper:
    """Callable adapter between one template helper name and one function."""

    def __init__(
        self,
        descriptor: FunctionDescriptor,
        context: ExecutionContext,
        name_delimiter: str,
        invoker: FunctionInvoker,
    ):
        self.descriptor = descriptor
        self.context = context
        self.name_delimiter = name_delimiter
        self.invoker = invoker

    @property
    def name(self) -> str:
        return self.descriptor.helper_name(self.name_delimiter)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if args and kwargs:
            raise ArityMismatchError(
                self.descriptor.name, len(args) + len(kwargs),
                len(self.descriptor.required_parameters), len(self.descriptor.parameters),
                message=(f"Function {self.descriptor.name} was called with both positional "
                         f"and named arguments; use one or the other."),
            )
        return self.call(kwargs if kwargs else args)

    def call(self, raw_arguments: RawArguments) -> Any:
        """Bind raw arguments, invoke, return the unwrapped result."""
        binding = bind_arguments(self.descriptor, self.context, raw_arguments, self.name_delimiter)
        return self.invoker.invoke(self.descriptor, self.context, binding)

    def __repr__(self) -> str:
        return f"<FunctionHelper {self.name}>"


def register_function_helpers(
    host: HelperHost,
    descriptors: Iterable[FunctionDescriptor],
    context: ExecutionContext,
    name_delimiter: str,
    invoker: FunctionInvoker,
) -> list[FunctionHelper]:
    """
    Register one helper per descriptor. No filtering happens here; pass
    in exactly the descriptors that should be callable.

    Raises DuplicateRegistrationError if a helper name is already taken,
    before registering anything.
    """
    helpers = [FunctionHelper(d, context, name_delimiter, invoker) for d in descriptors]

    seen: set[str] = set()
    for helper in helpers:
        if helper.name in seen or host.has_helper(helper.name):
            raise DuplicateRegistrationError(helper.name)
        seen.add(helper.name)

    for helper in helpers:
        host.register_helper(helper.name, helper)
        logger.debug("function_helper_registered",
                     helper=helper.name,
                     function=helper.descriptor.qualified_name)

    logger.info("function_helpers_registered", count=len(helpers))
    return helpers
