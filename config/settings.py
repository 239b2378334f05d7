"""
Configuration loader for the prompt bridge.
Reads settings from YAML file with environment variable substitution.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml


class ReActModel(str, Enum):
    """Models the ReAct prompt has been tuned for."""
    TEXT_DAVINCI_003 = "text-davinci-003"
    GPT35_TURBO = "gpt-35-turbo"
    GPT4_32K = "gpt4-32k"


@dataclass
class TemplateConfig:
    name_delimiter: str = "_"           # plugin/function separator in helper names; "_" keeps them Jinja identifiers
    strict_undefined: bool = True       # undefined template variables abort the render


@dataclass
class FlowOrchestratorConfig:
    excluded_plugins: set[str] = field(default_factory=set)
    excluded_functions: set[str] = field(default_factory=set)
    max_tokens: int = 1024              # max tokens in a generated plan
    max_variable_length: int = 400      # longer variables are left out of prompts
    max_step_iterations: int = 10
    min_iteration_time_ms: int = 0
    react_prompt_template: Optional[str] = None
    react_model: Optional[ReActModel] = None


@dataclass
class Settings:
    app_name: str = "PromptBridge"
    debug: bool = False
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    orchestrator: FlowOrchestratorConfig = field(default_factory=FlowOrchestratorConfig)


_settings: Optional[Settings] = None


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""
    pattern = re.compile(r'\$\{(\w+)\}')
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))
    return pattern.sub(replacer, value)


def _process_values(obj: Any) -> Any:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _process_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_process_values(v) for v in obj]
    return obj


def load_settings(config_path: str = None) -> Settings:
    """Load settings from YAML file."""
    global _settings

    if config_path is None:
        config_path = os.environ.get(
            "PROMPTBRIDGE_CONFIG",
            str(Path(__file__).parent / "settings.yaml"),
        )

    settings = Settings()

    if Path(config_path).exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _process_values(raw)

        settings.app_name = raw.get("app_name", settings.app_name)
        settings.debug = raw.get("debug", settings.debug)

        if "templates" in raw:
            t = raw["templates"]
            settings.templates = TemplateConfig(
                name_delimiter=t.get("name_delimiter", "_"),
                strict_undefined=t.get("strict_undefined", True),
            )

        if "orchestrator" in raw:
            o = raw["orchestrator"]
            react_model = o.get("react_model")
            settings.orchestrator = FlowOrchestratorConfig(
                excluded_plugins=set(o.get("excluded_plugins", [])),
                excluded_functions=set(o.get("excluded_functions", [])),
                max_tokens=int(o.get("max_tokens", 1024)),
                max_variable_length=int(o.get("max_variable_length", 400)),
                max_step_iterations=int(o.get("max_step_iterations", 10)),
                min_iteration_time_ms=int(o.get("min_iteration_time_ms", 0)),
                react_prompt_template=o.get("react_prompt_template"),
                react_model=ReActModel(react_model) if react_model else None,
            )

    _settings = settings
    return settings


def get_settings() -> Settings:
    """Return cached settings or load from default path."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
