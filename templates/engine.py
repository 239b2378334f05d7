"""
Template engine host — Jinja2 with registry functions as helpers.

TemplateEngine owns a Jinja2 Environment and a helper-registration
primitive that refuses duplicate names. FunctionPromptTemplate is what
callers normally use: it renders a template text with every registry
function available as a helper, building a fresh ExecutionContext and
helper set for each render so concurrent renders never share state.

    registry = FunctionRegistry()
    registry.add_function("math", add)
    template = FunctionPromptTemplate("1 + 2 = {{ math_add(a=1, b=2) }}", registry)
    template.render()   # "1 + 2 = 3"
"""
from __future__ import annotations

import threading
import structlog
from typing import Any, Callable, Optional

from jinja2 import BaseLoader, Environment, StrictUndefined, Undefined

from config.settings import FlowOrchestratorConfig, TemplateConfig, get_settings
from functions.registry import FunctionRegistry
from templates.arguments import ExecutionContext
from templates.errors import DuplicateRegistrationError
from templates.helpers import register_function_helpers
from templates.invoker import FunctionInvoker

logger = structlog.get_logger()


class TemplateEngine:
    """A Jinja2 environment whose globals are the registered helpers."""

    def __init__(self, strict_undefined: bool = True):
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=False,  # prompts, not HTML
            undefined=StrictUndefined if strict_undefined else Undefined,
            keep_trailing_newline=True,
        )
        self._helpers: set[str] = set()

    def register_helper(self, name: str, helper: Callable[..., Any]) -> None:
        if name in self._helpers or name in self.env.globals:
            raise DuplicateRegistrationError(name)
        if not name.isidentifier():
            logger.warning("helper_name_not_identifier", helper=name)
        self.env.globals[name] = helper
        self._helpers.add(name)

    def has_helper(self, name: str) -> bool:
        return name in self._helpers or name in self.env.globals

    @property
    def helper_names(self) -> list[str]:
        return sorted(self._helpers)

    def render(self, template_text: str, variables: dict[str, Any] = None) -> str:
        return self.env.from_string(template_text).render(variables or {})


class FunctionPromptTemplate:
    """A template text rendered with registry functions as helpers."""

    def __init__(
        self,
        template_text: str,
        registry: FunctionRegistry,
        template_config: TemplateConfig = None,
        orchestrator_config: FlowOrchestratorConfig = None,
    ):
        settings = get_settings() if template_config is None or orchestrator_config is None else None
        self.template_text = template_text
        self.registry = registry
        self.template_config = template_config or settings.templates
        self.orchestrator_config = orchestrator_config or settings.orchestrator

    def render(
        self,
        arguments: dict[str, Any] = None,
        cancellation: Optional[threading.Event] = None,
    ) -> str:
        """
        Render once. Arguments seed the ExecutionContext and are also
        visible to the template as variables.
        """
        context = ExecutionContext(arguments or {})
        engine = TemplateEngine(strict_undefined=self.template_config.strict_undefined)

        descriptors = self.registry.list_all(
            excluded_plugins=self.orchestrator_config.excluded_plugins,
            excluded_functions=self.orchestrator_config.excluded_functions,
        )
        register_function_helpers(
            engine, descriptors, context,
            self.template_config.name_delimiter,
            FunctionInvoker(self.registry, cancellation),
        )
        return engine.render(self.template_text, dict(context))
