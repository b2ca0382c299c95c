"""Expansion of raw pass/fail declarations into concrete expectations."""

from dataclasses import dataclass, field
from typing import Any, Iterator

from pydantic import ValidationError as PydanticValidationError

from .errors import DeclarationError
from .fixtures import FixtureStore
from .types import Disposition, Expectation, ExpectedDetail, SchemaSpecFixture

WILDCARD = "*"


@dataclass(frozen=True)
class EntrySet:
    """Explicit entry names, each with its own optional detail."""
    entries: dict[str, ExpectedDetail | None]


@dataclass(frozen=True)
class EntryList:
    """Explicit entry names without details."""
    entries: tuple[str, ...]


@dataclass(frozen=True)
class Wildcard:
    """Every entry of the referenced data fixture, sharing one detail."""
    detail: ExpectedDetail | None = None


Declaration = EntrySet | EntryList | Wildcard


def _parse_detail(raw: Any, where: str) -> ExpectedDetail | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DeclarationError(f"invalid test spec detail for {where}: {raw!r}")
    try:
        return ExpectedDetail.model_validate(raw)
    except PydanticValidationError as e:
        raise DeclarationError(f"invalid test spec detail for {where}: {e}") from e


def classify(raw: Any, where: str = "declaration") -> Declaration:
    """Classify a raw pass/fail declaration into its tagged variant."""
    if isinstance(raw, dict):
        if list(raw) == [WILDCARD]:
            return Wildcard(detail=_parse_detail(raw[WILDCARD], where))
        return EntrySet(entries={
            str(entry): _parse_detail(detail, f"{where}/{entry}")
            for entry, detail in raw.items()
        })

    if isinstance(raw, list):
        if raw == [WILDCARD]:
            return Wildcard()
        if not all(isinstance(entry, str) for entry in raw):
            raise DeclarationError(f"invalid test spec for {where}: {raw!r}")
        return EntryList(entries=tuple(raw))

    if raw == WILDCARD:
        return Wildcard()

    raise DeclarationError(f"invalid test spec for {where}: {raw!r}")


@dataclass
class ExpandedSpec:
    """A schema spec with its declarations resolved against the data fixtures."""
    fixture: SchemaSpecFixture
    expect: dict[Disposition, dict[str, dict[str, ExpectedDetail | None]]] = field(
        default_factory=dict
    )

    @property
    def name(self) -> str:
        return self.fixture.name

    def sources(self, disposition: Disposition) -> list[str]:
        return sorted(self.expect.get(disposition, {}))

    def expectations(self, disposition: Disposition | None = None) -> Iterator[Expectation]:
        """Yield expectations in run order: pass before fail, then by source and entry."""
        dispositions = [disposition] if disposition else list(Disposition)
        for pf in dispositions:
            for source in self.sources(pf):
                entries = self.expect[pf][source]
                for entry in sorted(entries):
                    yield Expectation(
                        schema_name=self.name,
                        disposition=pf,
                        source=source,
                        entry=entry,
                        detail=entries[entry],
                    )


class ExpectationExpander:
    """Resolves declarations against a fully loaded fixture store."""

    def __init__(self, store: FixtureStore):
        self.store = store

    def resolve(self, declaration: Declaration, source: str) -> dict[str, ExpectedDetail | None]:
        """Turn one classified declaration into an entry -> detail mapping."""
        data = self.store.data_fixture(source)

        if isinstance(declaration, Wildcard):
            return {entry: declaration.detail for entry in data.entries}

        if isinstance(declaration, EntryList):
            entries = {entry: None for entry in declaration.entries}
        else:
            entries = dict(declaration.entries)

        missing = sorted(set(entries) - set(data.entries))
        if missing:
            raise DeclarationError(
                f"test data {source} has no entries named {', '.join(missing)}"
            )
        return entries

    def expand(self, fixture: SchemaSpecFixture) -> ExpandedSpec:
        expanded = ExpandedSpec(fixture=fixture)
        for pf in Disposition:
            for source, raw in fixture.declarations(pf).items():
                declaration = classify(raw, f"{fixture.name} {pf.value} {source}")
                expanded.expect.setdefault(pf, {})[source] = self.resolve(declaration, source)
        return expanded

    def expand_all(self) -> list[ExpandedSpec]:
        """Expand every loaded schema spec, in lexical name order."""
        return [self.expand(fixture) for fixture in self.store.schema_fixtures()]
