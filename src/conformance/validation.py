"""Schema engines the harness drives.

An engine builds schema objects from raw definitions and validates values
against them, reporting the outcome as ``Accepted`` or ``Rejected``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import jsonschema
from jsonschema.exceptions import best_match
from jsonschema.validators import Draft202012Validator, validator_for

from .types import Accepted, EngineKind, Rejected, ValidationOutcome


class SchemaConstructionError(Exception):
    """Raised by an engine when a definition does not describe a schema."""
    pass


class SchemaEngine(ABC):
    """Abstract schema engine interface."""

    name = "abstract"

    @abstractmethod
    def make_schema(self, definition: Any) -> Any:
        """Build a schema object, or raise SchemaConstructionError."""
        pass

    @abstractmethod
    def validate(self, schema: Any, value: Any) -> ValidationOutcome:
        """Validate a value against a schema built by this engine."""
        pass


class JsonSchemaEngine(SchemaEngine):
    """Engine backed by the jsonschema library."""

    name = "jsonschema"

    def __init__(self, default_validator: type = Draft202012Validator):
        """Initialize engine.

        Args:
            default_validator: Validator class used when a definition has no
                ``$schema`` keyword
        """
        self.default_validator = default_validator

    def make_schema(self, definition: Any) -> Any:
        if not isinstance(definition, (dict, bool)):
            raise SchemaConstructionError(
                f"schema must be an object or boolean, got {type(definition).__name__}"
            )
        if isinstance(definition, dict) and not isinstance(definition.get("$schema", ""), str):
            raise SchemaConstructionError("$schema must be a string")

        validator_cls = validator_for(definition, default=self.default_validator)
        try:
            validator_cls.check_schema(definition)
        except jsonschema.SchemaError as e:
            raise SchemaConstructionError(e.message) from e

        return validator_cls(definition)

    def validate(self, schema: Any, value: Any) -> ValidationOutcome:
        errors = list(schema.iter_errors(value))
        if not errors:
            return Accepted()

        best = best_match(errors)
        path_to_value = list(best.absolute_path)
        # Every keyword that failed at the same location counts as a failure type
        failure_types = sorted({
            str(error.validator) for error in errors
            if list(error.absolute_path) == path_to_value
        })

        return Rejected(
            failure_types=failure_types,
            path_to_value=path_to_value,
            path_to_check=list(best.absolute_schema_path),
            message=best.message,
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_STUB_TYPES = {
    "any": lambda v: True,
    "nil": lambda v: v is None,
    "bool": lambda v: isinstance(v, bool),
    "num": _is_number,
    "int": lambda v: _is_number(v) and float(v).is_integer(),
    "str": lambda v: isinstance(v, str),
    "arr": lambda v: isinstance(v, list),
    "map": lambda v: isinstance(v, dict),
}


@dataclass(frozen=True)
class StubSchema:
    """Schema object built by the stub engine."""
    type_name: str


class StubSchemaEngine(SchemaEngine):
    """Stub implementation for development/testing.

    Understands ``{"type": name}`` (or a bare type name) for the basic type
    names, in short (``str``) or long (``//str``) form.
    """

    name = "stub"

    def make_schema(self, definition: Any) -> StubSchema:
        if isinstance(definition, str):
            definition = {"type": definition}
        if not isinstance(definition, dict) or set(definition) != {"type"}:
            raise SchemaConstructionError(f"unknown schema definition: {definition!r}")

        type_name = definition["type"]
        if not isinstance(type_name, str):
            raise SchemaConstructionError(f"unknown type: {type_name!r}")
        if type_name.startswith("//"):
            type_name = type_name[2:]
        if type_name not in _STUB_TYPES:
            raise SchemaConstructionError(f"unknown type: {definition['type']!r}")

        return StubSchema(type_name=type_name)

    def validate(self, schema: StubSchema, value: Any) -> ValidationOutcome:
        if _STUB_TYPES[schema.type_name](value):
            return Accepted()
        return Rejected(
            failure_types=["type"],
            path_to_value=[],
            path_to_check=["type"],
            message=f"value is not of type {schema.type_name}",
        )


def create_engine(kind: EngineKind | str) -> SchemaEngine:
    """Create a shipped engine by kind."""
    kind = EngineKind(kind)
    if kind is EngineKind.STUB:
        return StubSchemaEngine()
    return JsonSchemaEngine()
