"""Known-failure ("fudge") overrides.

A known failure marks a check that is currently expected to diverge from its
declared outcome. The check still runs and is still reported, but a failure
under a known reason does not fail the run.

Configuration shape (YAML or an equivalent mapping)::

    num-range:
      str:
        "5.1": "num/str distinction is lossy here"
    int:
      str: "num/str distinction is lossy here"
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import DeclarationError


@dataclass(frozen=True)
class UniformReason:
    """Applies to every entry from a (schema, source) pair."""
    reason: str

    def resolve(self, entry: str) -> str | None:
        return self.reason or None


@dataclass(frozen=True)
class PerEntryReason:
    """Applies only to the named entries."""
    reasons: dict[str, str]

    def resolve(self, entry: str) -> str | None:
        return self.reasons.get(entry) or None


Override = UniformReason | PerEntryReason


class KnownFailureRegistry:
    """Static table of tolerated discrepancies keyed by (schema, source)."""

    def __init__(self, overrides: dict[tuple[str, str], Override] | None = None):
        self._overrides = dict(overrides or {})

    def __len__(self) -> int:
        return len(self._overrides)

    @classmethod
    def from_mapping(cls, table: dict[str, Any] | None) -> "KnownFailureRegistry":
        """Build a registry from ``{schema: {source: reason | {entry: reason}}}``."""
        if table is None:
            return cls()
        if not isinstance(table, dict):
            raise DeclarationError(f"known failures must be a mapping, got {table!r}")

        overrides: dict[tuple[str, str], Override] = {}
        for schema, sources in table.items():
            if not isinstance(sources, dict):
                raise DeclarationError(f"known failures for {schema} must be a mapping")
            for source, value in sources.items():
                overrides[(str(schema), str(source))] = cls._parse_override(schema, source, value)
        return cls(overrides)

    @staticmethod
    def _parse_override(schema: str, source: str, value: Any) -> Override:
        if isinstance(value, str):
            return UniformReason(value)
        if isinstance(value, dict) and all(isinstance(r, str) for r in value.values()):
            return PerEntryReason({str(entry): reason for entry, reason in value.items()})
        raise DeclarationError(f"invalid known failure for {schema}/{source}: {value!r}")

    @classmethod
    def from_yaml(cls, path: Path) -> "KnownFailureRegistry":
        """Load a registry from a YAML file."""
        try:
            with open(path) as f:
                table = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise DeclarationError(f"cannot load known failures from {path}: {e}") from e
        return cls.from_mapping(table)

    def reason_for(self, schema: str, source: str, entry: str) -> str | None:
        """Reason a check is known to diverge, or None."""
        override = self._overrides.get((schema, source))
        if override is None:
            return None
        return override.resolve(entry)
