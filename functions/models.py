"""
Function Models — metadata for callable functions exposed to templates.

A FunctionDescriptor is the read-only description of one function the
registry knows about: which plugin it belongs to, its name, and its
ordered parameters. Descriptors are frozen once built; the live callable
is fetched separately from the registry when it is time to invoke.

Parameter types are a closed set of tags (ParameterType) rather than
arbitrary Python types, so compatibility checks stay a small, explicit
table instead of open-ended reflection.
"""
from __future__ import annotations

import inspect
import types
import typing
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ──────────────────────────────────────────────────────────────
#  Parameter Types
# ──────────────────────────────────────────────────────────────

class ParameterType(str, Enum):
    """The declared type of a function parameter."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    @property
    def python_type(self) -> type:
        return _PYTHON_TYPES[self]

    @property
    def is_numeric(self) -> bool:
        return self in (ParameterType.INTEGER, ParameterType.NUMBER)

    @classmethod
    def from_schema(cls, schema: Optional[dict[str, Any]]) -> Optional["ParameterType"]:
        """Read the tag from a JSON schema's "type" keyword, if it names one we know."""
        if not schema:
            return None
        raw = schema.get("type")
        if isinstance(raw, list):
            # ["number", "null"] style nullable schemas
            raw = next((t for t in raw if t != "null"), None)
        try:
            return cls(raw)
        except ValueError:
            return None

    @classmethod
    def from_annotation(cls, annotation: Any) -> tuple[Optional["ParameterType"], bool]:
        """
        Map a Python annotation to (tag, nullable).

        Optional[X] / X | None is stripped to X. Anything outside the closed
        set (Any, custom classes, unions of several types) maps to None,
        which means "unspecified".
        """
        if annotation is inspect.Parameter.empty or annotation is Any:
            return None, False

        nullable = False
        origin = typing.get_origin(annotation)
        if origin is Union or origin is getattr(types, "UnionType", None):
            members = [a for a in typing.get_args(annotation) if a is not type(None)]
            nullable = len(members) < len(typing.get_args(annotation))
            if len(members) != 1:
                return None, nullable
            annotation = members[0]
            origin = typing.get_origin(annotation)

        base = origin or annotation
        for tag, py_type in _ANNOTATION_TYPES:
            if base is py_type:
                return tag, nullable
        return None, nullable


_PYTHON_TYPES: dict[ParameterType, type] = {
    ParameterType.STRING: str,
    ParameterType.INTEGER: int,
    ParameterType.NUMBER: float,
    ParameterType.BOOLEAN: bool,
    ParameterType.ARRAY: list,
    ParameterType.OBJECT: dict,
}

# bool must be checked before int
_ANNOTATION_TYPES: list[tuple[ParameterType, type]] = [
    (ParameterType.BOOLEAN, bool),
    (ParameterType.STRING, str),
    (ParameterType.INTEGER, int),
    (ParameterType.NUMBER, float),
    (ParameterType.NUMBER, Decimal),
    (ParameterType.ARRAY, list),
    (ParameterType.ARRAY, tuple),
    (ParameterType.OBJECT, dict),
]


# ──────────────────────────────────────────────────────────────
#  Descriptors
# ──────────────────────────────────────────────────────────────

class ParameterDescriptor(BaseModel):
    """Describes one parameter of a function."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    required: bool = False
    declared_type: Optional[ParameterType] = None
    json_schema: Optional[dict[str, Any]] = None  # e.g. {"type": "number"}
    nullable: bool = False                        # declared as Optional[...]
    default: Any = None                           # informational only, never bound by the bridge

    @property
    def effective_type(self) -> Optional[ParameterType]:
        """Declared tag, else the tag named by the schema. None means unspecified."""
        if self.declared_type is not None:
            return self.declared_type
        return ParameterType.from_schema(self.json_schema)

    @property
    def is_numeric(self) -> bool:
        if self.declared_type is not None and self.declared_type.is_numeric:
            return True
        schema_type = ParameterType.from_schema(self.json_schema)
        return schema_type is not None and schema_type.is_numeric

    @property
    def type_label(self) -> str:
        """Human-readable expected type for error messages."""
        if self.declared_type is not None:
            return self.declared_type.value
        if self.json_schema is not None:
            return str(self.json_schema)
        return "any"


class FunctionDescriptor(BaseModel):
    """Read-only metadata for one registered function."""
    model_config = ConfigDict(frozen=True)

    plugin_name: str                              # namespace, e.g. "math"
    name: str                                     # simple name, e.g. "add"
    description: str = ""
    parameters: tuple[ParameterDescriptor, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{self.plugin_name}.{self.name}" if self.plugin_name else self.name

    @property
    def required_parameters(self) -> list[ParameterDescriptor]:
        return [p for p in self.parameters if p.required]

    def helper_name(self, name_delimiter: str) -> str:
        """Name the function is exposed under inside a template."""
        return f"{self.plugin_name}{name_delimiter}{self.name}"


# ──────────────────────────────────────────────────────────────
#  Results
# ──────────────────────────────────────────────────────────────

class FunctionResult(BaseModel):
    """
    Outcome of one function invocation.

    metadata is the marker mapping: flow steps write control markers into
    it (see flows.signals) for an external orchestrator to read.
    """
    function_name: str = ""
    value: Any = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def value_type(self) -> Optional[type]:
        return type(self.value) if self.value is not None else None
