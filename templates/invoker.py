"""
Function Invoker — runs an async function from a synchronous template.

Template rendering is synchronous; registry functions are coroutines.
run_blocking() is the one place where the two meet: the calling thread
is parked until the coroutine finishes.

  - no event loop running in this thread → asyncio.run() on this thread
  - an event loop is running (render called from async code) → the
    coroutine runs on a fresh loop in a single worker thread and the
    caller joins it

In the second case the caller's loop is blocked for the duration of the
call. Functions must not depend on objects bound to that outer loop.
"""
from __future__ import annotations

import asyncio
import threading
import structlog
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Coroutine, Optional

from functions.models import FunctionDescriptor, FunctionResult
from functions.registry import FunctionCatalog
from models.schemas import ChatMessageContent
from templates.errors import InvocationFailureError

logger = structlog.get_logger()


def run_blocking(coroutine: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine to completion and return its result, blocking the caller."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coroutine)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="function-invoker") as pool:
        return pool.submit(asyncio.run, coroutine).result()


def unwrap_result(result: FunctionResult) -> Any:
    """
    ChatMessageContent is reduced to its text. Only the exact type is
    unwrapped; subclasses and every other value pass through.
    """
    value = result.value
    if result.value_type is ChatMessageContent:
        return value.content
    return value


class FunctionInvoker:
    """Resolves a described function and calls it synchronously."""

    def __init__(self, catalog: FunctionCatalog, cancellation: Optional[threading.Event] = None):
        """
        Args:
            catalog:      where live callables are resolved
            cancellation: handed to every function at invocation start; the
                          function decides whether to honor it
        """
        self._catalog = catalog
        self._cancellation = cancellation

    def invoke(
        self,
        descriptor: FunctionDescriptor,
        context: dict[str, Any],
        arguments: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Call the function with this call's binding (or the whole context when none is given)."""
        function = self._catalog.resolve(descriptor.qualified_name)

        try:
            result = run_blocking(function.invoke(context, self._cancellation, arguments))
        except Exception as e:
            logger.error("function_invocation_failed",
                         function=descriptor.qualified_name,
                         error=str(e),
                         error_type=type(e).__name__)
            raise InvocationFailureError(descriptor.qualified_name, e) from e

        logger.debug("function_invoked",
                     function=descriptor.qualified_name,
                     result_type=type(result.value).__name__)
        return unwrap_result(result)
