"""Harness configuration errors.

Everything raised from here is a problem with the fixtures or the way the
harness was invoked, never a validation outcome under test.
"""


class HarnessError(Exception):
    """Base class for unrecoverable harness errors."""
    pass


class FixtureLoadError(HarnessError):
    """Raised when a fixture file cannot be read or decoded."""
    pass


class DuplicateFixtureError(HarnessError):
    """Raised when two fixtures of the same kind share a derived name."""
    pass


class UnknownFixtureError(HarnessError):
    """Raised when a data fixture is looked up but was never loaded."""
    pass


class DeclarationError(HarnessError):
    """Raised for malformed schema-spec or known-failure declarations."""
    pass


class SchemaBuildError(HarnessError):
    """Raised when a schema spec not marked invalid fails to build."""
    pass
