"""Runs expanded schema specs through an engine."""

from .assertions import AssertionEngine
from .errors import SchemaBuildError
from .expectations import ExpandedSpec
from .fixtures import FixtureStore
from .known_failures import KnownFailureRegistry
from .logging import HarnessLogger
from .reporting import Reporter
from .types import Disposition, RunSummary
from .validation import SchemaConstructionError, SchemaEngine


class TestRunner:
    """Builds each schema and checks every expectation against it."""

    __test__ = False

    def __init__(
        self,
        store: FixtureStore,
        engine: SchemaEngine,
        reporter: Reporter,
        known_failures: KnownFailureRegistry | None = None,
        logger: HarnessLogger | None = None,
    ):
        self.store = store
        self.engine = engine
        self.reporter = reporter
        self.known_failures = known_failures or KnownFailureRegistry()
        self.logger = logger
        self.assertions = AssertionEngine(engine, reporter, logger)

    def run(self, specs: list[ExpandedSpec]) -> RunSummary:
        """Run specs in lexical name order and close the reporter."""
        for spec in sorted(specs, key=lambda s: s.name):
            self.run_spec(spec)
        return self.reporter.finish()

    def run_spec(self, spec: ExpandedSpec) -> None:
        try:
            schema = self.engine.make_schema(spec.fixture.definition)
            error = None
        except SchemaConstructionError as e:
            schema, error = None, e

        if error is not None and self.logger:
            self.logger.schema_build_failed(spec.name, str(error), expected=spec.fixture.invalid)

        if spec.fixture.invalid:
            diagnostics = [] if error is not None else ["schema was built"]
            self.reporter.ok(error is not None, f"BAD SCHEMA: {spec.name}", diagnostics)
            return

        if error is not None:
            raise SchemaBuildError(
                f"couldn't produce schema for valid input ({spec.name}): {error}"
            ) from error

        if self.logger:
            self.logger.schema_built(spec.name, self.engine.name)

        for expectation in spec.expectations():
            value = self.store.decode_entry(expectation.source, expectation.entry)
            reason = self.known_failures.reason_for(
                spec.name, expectation.source, expectation.entry
            )

            with self.reporter.todo(reason):
                if expectation.disposition is Disposition.PASS:
                    ok = self.assertions.assert_pass(
                        schema, spec.name, value, expectation.input_desc
                    )
                else:
                    ok = self.assertions.assert_fail(
                        schema, spec.name, value, expectation.input_desc, expectation.detail
                    )

            if self.logger:
                self.logger.entry_checked(
                    spec.name,
                    expectation.input_desc,
                    expectation.disposition.value,
                    ok,
                    todo=reason,
                )
