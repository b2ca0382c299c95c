"""Fixture store for data fixtures and schema-spec fixtures."""

import json
from pathlib import Path, PurePath
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from .errors import (
    DeclarationError,
    DuplicateFixtureError,
    FixtureLoadError,
    UnknownFixtureError,
)
from .types import DataFixture, SchemaSpecFixture


def fixture_name(path: str | PurePath) -> str:
    """Derive a fixture name from a file path: base name without extension."""
    return PurePath(path).stem


class FixtureStore:
    """Holds every loaded fixture, keyed by derived name.

    Fixtures are loaded once and treated as read-only afterwards. The store
    owns the JSON decoder/encoder pair used for fixture files and for cloning
    entry values handed to an engine.
    """

    def __init__(self, encoded_entries: bool = False):
        """Initialize an empty store.

        Args:
            encoded_entries: Treat string entry values as JSON texts that must
                be decoded before validation.
        """
        self.encoded_entries = encoded_entries
        self._decoder = json.JSONDecoder()
        self._encoder = json.JSONEncoder(separators=(",", ":"), sort_keys=True)
        self._data: dict[str, DataFixture] = {}
        self._specs: dict[str, SchemaSpecFixture] = {}

    @property
    def data_names(self) -> list[str]:
        return sorted(self._data)

    @property
    def spec_names(self) -> list[str]:
        return sorted(self._specs)

    def entry_key(self, value: Any) -> str:
        """Key for an element of a sequence fixture."""
        if isinstance(value, str):
            return value
        return self._encoder.encode(value)

    def slurp_json(self, path: Path) -> Any:
        """Read and decode a JSON file, naming the file on failure."""
        try:
            with open(path, encoding="utf-8") as f:
                return self._decoder.decode(f.read())
        except (OSError, ValueError) as e:
            raise FixtureLoadError(f"{e} (in {path})") from e

    def load_data_fixtures(self, paths: Iterable[Path]) -> None:
        for path in paths:
            self.add_data_fixture(fixture_name(path), self.slurp_json(Path(path)))

    def load_schema_fixtures(self, paths: Iterable[Path]) -> None:
        for path in paths:
            self.add_schema_fixture(fixture_name(path), self.slurp_json(Path(path)))

    def add_data_fixture(self, name: str, raw: Any) -> DataFixture:
        """Register a data fixture from its decoded JSON."""
        if name in self._data:
            raise DuplicateFixtureError(f"already loaded data called {name}")

        if isinstance(raw, list):
            raw = {self.entry_key(value): value for value in raw}
        if not isinstance(raw, dict):
            raise FixtureLoadError(
                f"data fixture {name} must be a JSON object or array, got {type(raw).__name__}"
            )

        fixture = DataFixture(name=name, entries=raw)
        self._data[name] = fixture
        return fixture

    def add_schema_fixture(self, name: str, raw: Any) -> SchemaSpecFixture:
        """Register a schema-spec fixture from its decoded JSON."""
        if name in self._specs:
            raise DuplicateFixtureError(f"already loaded schema spec tests for {name}")

        if not isinstance(raw, dict):
            raise DeclarationError(f"schema spec {name} must be a JSON object, got {raw!r}")

        try:
            fixture = SchemaSpecFixture.model_validate({**raw, "name": name})
        except PydanticValidationError as e:
            raise DeclarationError(f"invalid schema spec {name}: {e}") from e

        self._specs[name] = fixture
        return fixture

    def data_fixture(self, name: str) -> DataFixture:
        """Look up a data fixture by name."""
        if name not in self._data:
            raise UnknownFixtureError(f"no such test data: {name}")
        return self._data[name]

    def schema_fixture(self, name: str) -> SchemaSpecFixture:
        if name not in self._specs:
            raise UnknownFixtureError(f"no such schema spec: {name}")
        return self._specs[name]

    def schema_fixtures(self) -> list[SchemaSpecFixture]:
        """All schema specs in lexical name order."""
        return [self._specs[name] for name in self.spec_names]

    def decode_entry(self, source: str, entry: str) -> Any:
        """Return a fresh copy of an entry's value for the engine."""
        entries = self.data_fixture(source).entries
        if entry not in entries:
            raise UnknownFixtureError(f"no entry {entry} in test data {source}")

        raw = entries[entry]
        if self.encoded_entries and isinstance(raw, str):
            try:
                return self._decoder.decode(raw)
            except ValueError as e:
                raise FixtureLoadError(f"cannot decode {source}/{entry}: {e}") from e

        return self._decoder.decode(self._encoder.encode(raw))
