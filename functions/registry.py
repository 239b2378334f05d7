"""
Function Registry — catalog of plugin functions that templates can call.

Functions are grouped by plugin ("math", "people", ...) and addressed by
qualified name ("math.add"). The registry keeps two things apart:

  - metadata (FunctionDescriptor), enumerated with list_all()
  - the live callable (KernelFunction), fetched with resolve()

so the template bridge can register helpers from metadata alone and
only touch the callable when a helper actually runs.

Handlers are plain Python callables, sync or async. A handler receives
its bound parameters as keyword arguments; it may also declare
`context` (the ExecutionContext) and `cancellation` (a threading.Event)
to receive those.
"""
from __future__ import annotations

import inspect
import threading
import typing
import structlog
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional, Protocol

from functions.models import (
    FunctionDescriptor, FunctionResult, ParameterDescriptor, ParameterType,
)
from utils.numbers import is_finite_number, parse_number

logger = structlog.get_logger()

# Handler parameter names that are injected rather than bound from template arguments
INJECTED_PARAMETERS = frozenset({"context", "cancellation"})


class FunctionNotFoundError(KeyError):
    def __init__(self, qualified_name: str):
        self.qualified_name = qualified_name
        super().__init__(f"Function not found: {qualified_name}")


class FunctionCancelledError(Exception):
    def __init__(self, qualified_name: str):
        self.qualified_name = qualified_name
        super().__init__(f"Invocation of {qualified_name} was cancelled before it started")


class FunctionCatalog(Protocol):
    """What the template bridge needs from a registry."""

    def list_all(self) -> list[FunctionDescriptor]: ...

    def resolve(self, qualified_name: str) -> "KernelFunction": ...


# ──────────────────────────────────────────────────────────────
#  Live callable
# ──────────────────────────────────────────────────────────────

class KernelFunction:
    """A registered handler bound to its descriptor."""

    def __init__(self, descriptor: FunctionDescriptor, handler: Callable):
        self.descriptor = descriptor
        self._handler = handler
        params = inspect.signature(handler).parameters
        self._accepts_context = "context" in params
        self._accepts_cancellation = "cancellation" in params

    @property
    def qualified_name(self) -> str:
        return self.descriptor.qualified_name

    async def invoke(
        self,
        context: Mapping[str, Any],
        cancellation: Optional[threading.Event] = None,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> FunctionResult:
        """
        Run the handler.

        Parameters come from `arguments` (the binding of this call) when
        given, else from the context. The context is still injected whole
        for handlers that declare it.
        """
        source = context if arguments is None else arguments
        if cancellation is not None and cancellation.is_set():
            raise FunctionCancelledError(self.qualified_name)

        kwargs: dict[str, Any] = {}
        for param in self.descriptor.parameters:
            if param.name in source:
                kwargs[param.name] = _convert_argument(param, source[param.name])
        if self._accepts_context:
            kwargs["context"] = context
        if self._accepts_cancellation:
            kwargs["cancellation"] = cancellation

        value = self._handler(**kwargs)
        if inspect.isawaitable(value):
            value = await value

        if isinstance(value, FunctionResult):
            if not value.function_name:
                value.function_name = self.qualified_name
            return value
        return FunctionResult(function_name=self.qualified_name, value=value)


def _convert_argument(param: ParameterDescriptor, value: Any) -> Any:
    """Numeric text bound to a numeric parameter becomes a number."""
    if not (param.is_numeric and isinstance(value, str)):
        return value
    number = parse_number(value)
    if number is None:
        return value
    if param.effective_type is ParameterType.NUMBER:
        return float(number)
    if not is_finite_number(number):
        return value
    return number


# ──────────────────────────────────────────────────────────────
#  Registry
# ──────────────────────────────────────────────────────────────

class FunctionRegistry:
    """
    Central catalog of plugin functions.

    Used by:
    - register_function_helpers: to enumerate descriptors at setup
    - FunctionInvoker: to resolve the live callable at call time
    """

    def __init__(self):
        self._functions: dict[str, KernelFunction] = {}    # qualified name → function

    # ── Registration ──────────────────────────────────

    def register(self, descriptor: FunctionDescriptor, handler: Callable) -> KernelFunction:
        """Register a handler under an explicit descriptor."""
        name = descriptor.qualified_name
        if name in self._functions:
            logger.warning("kernel_function_replaced", name=name)
        function = KernelFunction(descriptor, handler)
        self._functions[name] = function
        logger.info("kernel_function_registered",
                    name=name,
                    parameters=[p.name for p in descriptor.parameters])
        return function

    def add_function(
        self,
        plugin_name: str,
        handler: Callable,
        name: str = None,
        description: str = None,
    ) -> FunctionDescriptor:
        """Convenience: describe a Python callable from its signature and register it."""
        descriptor = describe_callable(plugin_name, handler, name=name, description=description)
        self.register(descriptor, handler)
        return descriptor

    def add_plugin(self, plugin_name: str, handlers: Iterable[Callable]) -> list[FunctionDescriptor]:
        return [self.add_function(plugin_name, h) for h in handlers]

    # ── Lookup ────────────────────────────────────────

    def get(self, qualified_name: str) -> Optional[FunctionDescriptor]:
        function = self._functions.get(qualified_name)
        return function.descriptor if function else None

    def resolve(self, qualified_name: str) -> KernelFunction:
        function = self._functions.get(qualified_name)
        if function is None:
            raise FunctionNotFoundError(qualified_name)
        return function

    def list_all(
        self,
        excluded_plugins: Iterable[str] = (),
        excluded_functions: Iterable[str] = (),
    ) -> list[FunctionDescriptor]:
        """
        Enumerate descriptors, minus exclusions.

        excluded_functions matches either the simple or the qualified name.
        """
        excluded_plugins = set(excluded_plugins)
        excluded_functions = set(excluded_functions)
        descriptors = []
        for function in self._functions.values():
            d = function.descriptor
            if d.plugin_name in excluded_plugins:
                continue
            if d.name in excluded_functions or d.qualified_name in excluded_functions:
                continue
            descriptors.append(d)
        return descriptors

    @property
    def count(self) -> int:
        return len(self._functions)


def describe_callable(
    plugin_name: str,
    handler: Callable,
    name: str = None,
    description: str = None,
) -> FunctionDescriptor:
    """Build a FunctionDescriptor from a callable's signature and docstring."""
    signature = inspect.signature(handler)
    try:
        hints = typing.get_type_hints(handler)
    except (NameError, TypeError):
        hints = {}

    parameters = []
    for param in signature.parameters.values():
        if param.name in INJECTED_PARAMETERS:
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        declared_type, nullable = ParameterType.from_annotation(
            hints.get(param.name, param.annotation)
        )
        has_default = param.default is not inspect.Parameter.empty
        parameters.append(ParameterDescriptor(
            name=param.name,
            required=not has_default,
            declared_type=declared_type,
            nullable=nullable,
            default=param.default if has_default else None,
        ))

    if description is None:
        doc = inspect.getdoc(handler) or ""
        description = doc.splitlines()[0] if doc else ""

    return FunctionDescriptor(
        plugin_name=plugin_name,
        name=name or handler.__name__,
        description=description,
        parameters=tuple(parameters),
    )
