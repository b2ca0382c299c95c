"""Core types and enums for the conformance harness."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


PathSegment = str | int


class Disposition(Enum):
    """Declared outcome of validating an entry against a schema."""
    PASS = "pass"
    FAIL = "fail"


class EngineKind(Enum):
    """Schema engines shipped with the harness."""
    JSONSCHEMA = "jsonschema"
    STUB = "stub"


# Fixture data
class DataFixture(BaseModel):
    """Named collection of sample values."""
    name: str
    entries: dict[str, Any] = Field(default_factory=dict)


class SchemaSpecFixture(BaseModel):
    """Schema definition plus raw pass/fail declarations."""
    name: str
    invalid: bool = False
    definition: Any = Field(default=None, alias="schema")
    passes: dict[str, Any] = Field(default_factory=dict, alias="pass")
    fails: dict[str, Any] = Field(default_factory=dict, alias="fail")

    class Config:
        populate_by_name = True

    def declarations(self, disposition: Disposition) -> dict[str, Any]:
        """Raw declarations for one disposition, keyed by data fixture name."""
        return self.passes if disposition is Disposition.PASS else self.fails


class ExpectedDetail(BaseModel):
    """Fields of a rejection to check. Absent fields are not checked."""
    value: list[PathSegment] | None = None
    check: list[PathSegment] | None = None
    error: list[str] | None = None

    class Config:
        extra = "forbid"


class Expectation(BaseModel):
    """One resolved (schema, disposition, source, entry) check."""
    schema_name: str
    disposition: Disposition
    source: str
    entry: str
    detail: ExpectedDetail | None = None

    @property
    def input_desc(self) -> str:
        return f"{self.source}/{self.entry}"


# Validation outcomes
class Accepted(BaseModel):
    """The engine accepted the value."""
    pass


class Rejected(BaseModel):
    """The engine rejected the value with a structured failure."""
    failure_types: list[str] = Field(default_factory=list)
    path_to_value: list[PathSegment] = Field(default_factory=list)
    path_to_check: list[PathSegment] = Field(default_factory=list)
    message: str = ""

    def diagnostics(self) -> list[str]:
        """Human readable lines describing the rejection."""
        lines = [
            f"failure type(s): {' '.join(self.failure_types) or '(none)'}",
            f"value: {format_path(self.path_to_value)}",
            f"check: {format_path(self.path_to_check)}",
        ]
        if self.message:
            lines.append(f"message: {self.message}")
        return lines


ValidationOutcome = Accepted | Rejected


def format_path(path: list[PathSegment]) -> str:
    """Render a path as ``[ a b ]``, or ``(empty)`` for the root."""
    if not path:
        return "(empty)"
    return "[ " + " ".join(str(segment) for segment in path) + " ]"


# Reporting
class TestPoint(BaseModel):
    """A single recorded check."""
    __test__ = False

    number: int
    ok: bool
    description: str
    todo: str | None = None
    diagnostics: list[str] = Field(default_factory=list)

    @property
    def tolerated(self) -> bool:
        """Failed, but under a known-failure reason."""
        return not self.ok and self.todo is not None


class RunSummary(BaseModel):
    """Counts for a finished run."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    tolerated: int = 0
    unexpectedly_passing: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


class RunEvent(BaseModel):
    """Audit log event."""
    event_type: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    run_id: UUID
    note: str = ""
    level: str = "info"
    details: dict[str, Any] = Field(default_factory=dict)

