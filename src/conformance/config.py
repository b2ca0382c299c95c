"""Harness configuration loaded from YAML and command-line options."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import DeclarationError, FixtureLoadError
from .types import EngineKind

_PATH_FIELDS = ("schema_dir", "data_dir", "known_failures", "report")


def discover_fixture_files(directory: Path) -> list[Path]:
    """All ``*.json`` files below a directory, in sorted order."""
    if not directory.is_dir():
        raise FixtureLoadError(f"fixture directory not found: {directory}")
    return sorted(directory.rglob("*.json"))


class HarnessConfig(BaseModel):
    """Where fixtures live and how to run them."""
    schema_dir: Path | None = None
    data_dir: Path | None = None
    known_failures: Path | None = None
    engine: EngineKind = EngineKind.JSONSCHEMA
    encoded_entries: bool = False
    log_level: str = "WARNING"
    report: Path | None = None

    class Config:
        arbitrary_types_allowed = True

    @classmethod
    def from_yaml(cls, path: Path) -> "HarnessConfig":
        """Load config; relative paths resolve against the file's directory."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise DeclarationError(f"cannot load config {path}: {e}") from e

        if not isinstance(data, dict):
            raise DeclarationError(f"config {path} must be a mapping")

        for key in _PATH_FIELDS:
            if data.get(key) is not None:
                data[key] = path.parent / data[key]

        return cls.from_mapping(data, source=str(path))

    @classmethod
    def from_mapping(cls, data: dict[str, Any], source: str = "config") -> "HarnessConfig":
        try:
            return cls(**data)
        except PydanticValidationError as e:
            raise DeclarationError(f"invalid {source}: {e}") from e

    def merged(self, **overrides: Any) -> "HarnessConfig":
        """Copy with every non-None override applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        return self.from_mapping({**self.model_dump(), **update})

    def require_dirs(self) -> tuple[Path, Path]:
        if self.schema_dir is None or self.data_dir is None:
            raise DeclarationError("both a schema directory and a data directory are required")
        return self.schema_dir, self.data_dir

    def schema_files(self) -> list[Path]:
        return discover_fixture_files(self.require_dirs()[0])

    def data_files(self) -> list[Path]:
        return discover_fixture_files(self.require_dirs()[1])
