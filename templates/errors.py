"""
Errors raised while binding or invoking a function from a template.

Every error carries the function (and, where known, the parameter) so a
failed render points straight at the helper call that broke it. Binding
errors are raised before the function is ever invoked.
"""
from __future__ import annotations

from typing import Any


class FunctionHelperError(Exception):
    """Base exception for template function helpers."""

    def __init__(self, message: str, function_name: str = "", parameter_name: str = ""):
        self.function_name = function_name
        self.parameter_name = parameter_name
        super().__init__(message)


class MissingRequiredParameterError(FunctionHelperError):
    def __init__(self, function_name: str, parameter_name: str = "", message: str = ""):
        message = message or f"Parameter {parameter_name} is required for function {function_name}."
        super().__init__(message, function_name, parameter_name)


class TypeMismatchError(FunctionHelperError):
    def __init__(self, function_name: str, parameter_name: str, expected_type: str, received: Any):
        self.expected_type = expected_type
        self.received_type = type(received).__name__
        super().__init__(
            f"Invalid argument type for function {function_name}. Parameter {parameter_name} "
            f"expects type {expected_type} but received {self.received_type}.",
            function_name, parameter_name,
        )


class ArityMismatchError(FunctionHelperError):
    def __init__(self, function_name: str, received: int, required: int, declared: int, message: str = ""):
        self.received = received
        self.required = required
        self.declared = declared
        message = message or (
            f"Invalid parameter count for function {function_name}. {received} were specified "
            f"but between {required} and {declared} are accepted."
        )
        super().__init__(message, function_name)


class InvocationFailureError(FunctionHelperError):
    """The underlying function raised. The original exception is kept as .inner and __cause__."""

    def __init__(self, function_name: str, inner: BaseException):
        self.inner = inner
        super().__init__(f"Function {function_name} failed: {inner}", function_name)


class DuplicateRegistrationError(FunctionHelperError):
    def __init__(self, helper_name: str):
        self.helper_name = helper_name
        super().__init__(f"A helper named '{helper_name}' is already registered.", helper_name)
