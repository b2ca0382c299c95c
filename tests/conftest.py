"""Shared fixtures for conformance harness tests."""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from conformance.logging import create_harness_logger
from conformance.types import Accepted, Rejected
from conformance.validation import SchemaConstructionError, SchemaEngine

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class ScriptedEngine(SchemaEngine):
    """Engine whose outcomes are decided by a callable.

    Definitions equal to ``"broken"`` fail to build; every other definition is
    returned unchanged as the schema object.
    """

    name = "scripted"

    def __init__(self, decide: Callable[[Any, Any], Any] | None = None):
        self.decide = decide or (lambda schema, value: Accepted())
        self.calls: list[tuple[Any, Any]] = []

    def make_schema(self, definition: Any) -> Any:
        if definition == "broken":
            raise SchemaConstructionError("broken definition")
        return definition

    def validate(self, schema: Any, value: Any):
        self.calls.append((schema, value))
        outcome = self.decide(schema, value)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def rejected(types=None, value=None, check=None) -> Rejected:
    return Rejected(
        failure_types=["type"] if types is None else types,
        path_to_value=[] if value is None else value,
        path_to_check=["type"] if check is None else check,
    )


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def quiet_logger():
    """Logger that only reports errors, rendered as JSON."""
    return create_harness_logger(log_level="ERROR", enable_console=False)


@pytest.fixture
def write_fixtures(tmp_path):
    """Write schema-spec and data fixtures as JSON files.

    Returns a callable taking ``schemata`` and ``data`` mappings of
    name -> JSON content and returning ``(schema_files, data_files)``.
    """
    def _write(schemata: dict[str, Any], data: dict[str, Any]):
        schema_dir = tmp_path / "schemata"
        data_dir = tmp_path / "data"
        schema_dir.mkdir(exist_ok=True)
        data_dir.mkdir(exist_ok=True)

        schema_files = []
        for name, content in schemata.items():
            path = schema_dir / f"{name}.json"
            path.write_text(json.dumps(content))
            schema_files.append(path)

        data_files = []
        for name, content in data.items():
            path = data_dir / f"{name}.json"
            path.write_text(json.dumps(content))
            data_files.append(path)

        return schema_files, data_files

    return _write
