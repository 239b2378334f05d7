"""Shared test fixtures for the prompt bridge."""
import pytest
from typing import Optional

from functions.models import FunctionDescriptor, ParameterDescriptor, ParameterType
from functions.registry import FunctionRegistry
from models.schemas import ChatMessageContent
from templates.arguments import ExecutionContext
from templates.invoker import FunctionInvoker


# ══════════════════════════════════════════════════════
#  PLUGIN FUNCTIONS
# ══════════════════════════════════════════════════════

async def add(a: int, b: int) -> int:
    """Add two integers."""
    return a + b


def greet(name: str) -> str:
    """Greet someone by name."""
    return f"Hello, {name}!"


async def summarize(text: str, max_words: Optional[int] = None) -> str:
    words = text.split()
    if max_words is not None:
        words = words[:max_words]
    return " ".join(words)


async def reply(message: str) -> ChatMessageContent:
    return ChatMessageContent(content=f"echo: {message}", model_id="test-model")


async def explode() -> None:
    raise RuntimeError("boom")


async def remember(key: str, value: str, context) -> str:
    context[f"remembered_{key}"] = value
    return "ok"


# ══════════════════════════════════════════════════════
#  FIXTURES
# ══════════════════════════════════════════════════════

@pytest.fixture
def registry() -> FunctionRegistry:
    registry = FunctionRegistry()
    registry.add_function("math", add)
    registry.add_function("people", greet)
    registry.add_function("text", summarize)
    registry.add_function("chat", reply)
    registry.add_function("system", explode)
    registry.add_function("memory", remember)
    return registry


@pytest.fixture
def context() -> ExecutionContext:
    return ExecutionContext()


@pytest.fixture
def invoker(registry) -> FunctionInvoker:
    return FunctionInvoker(registry)


@pytest.fixture
def add_descriptor() -> FunctionDescriptor:
    return FunctionDescriptor(
        plugin_name="math",
        name="add",
        parameters=(
            ParameterDescriptor(name="a", required=True, declared_type=ParameterType.INTEGER),
            ParameterDescriptor(name="b", required=True, declared_type=ParameterType.INTEGER),
        ),
    )


@pytest.fixture
def search_descriptor() -> FunctionDescriptor:
    """Two required parameters and two optional ones."""
    return FunctionDescriptor(
        plugin_name="web",
        name="search",
        parameters=(
            ParameterDescriptor(name="query", required=True, declared_type=ParameterType.STRING),
            ParameterDescriptor(name="site", required=True, declared_type=ParameterType.STRING),
            ParameterDescriptor(name="limit", declared_type=ParameterType.INTEGER),
            ParameterDescriptor(name="safe", declared_type=ParameterType.BOOLEAN),
        ),
    )
