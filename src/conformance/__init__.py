"""Conformance harness for schema engines."""

from .errors import (
    DeclarationError,
    DuplicateFixtureError,
    FixtureLoadError,
    HarnessError,
    SchemaBuildError,
    UnknownFixtureError,
)
from .harness import ConformanceHarness
from .known_failures import KnownFailureRegistry
from .reporting import CollectingReporter, Reporter, TapReporter
from .validation import JsonSchemaEngine, SchemaConstructionError, SchemaEngine, StubSchemaEngine

__all__ = [
    'ConformanceHarness', 'KnownFailureRegistry',
    'Reporter', 'CollectingReporter', 'TapReporter',
    'SchemaEngine', 'JsonSchemaEngine', 'StubSchemaEngine', 'SchemaConstructionError',
    'HarnessError', 'FixtureLoadError', 'DuplicateFixtureError', 'UnknownFixtureError',
    'DeclarationError', 'SchemaBuildError',
]
