"""
Plugin functions.

A FunctionRegistry holds plugin functions; each one is described by a
frozen FunctionDescriptor and backed by a KernelFunction that runs the
handler asynchronously and returns a FunctionResult.
"""
from functions.models import (
    ParameterType, ParameterDescriptor, FunctionDescriptor, FunctionResult,
)
from functions.registry import (
    FunctionRegistry, KernelFunction, FunctionCatalog,
    FunctionNotFoundError, FunctionCancelledError, describe_callable,
)
