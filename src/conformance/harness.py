"""Main harness class."""

from pathlib import Path
from typing import Iterable
from uuid import UUID, uuid4

from .audit import AuditLog
from .config import HarnessConfig
from .expectations import ExpandedSpec, ExpectationExpander
from .fixtures import FixtureStore
from .known_failures import KnownFailureRegistry
from .logging import HarnessLogger, LoggingContextManager, create_harness_logger
from .reporting import CollectingReporter, Reporter
from .runner import TestRunner
from .types import Disposition, Expectation, RunSummary
from .validation import JsonSchemaEngine, SchemaEngine, create_engine


class ConformanceHarness:
    """Loads fixtures eagerly and runs every expectation through an engine.

    Data fixtures are loaded first, then schema specs, then every spec is
    expanded, so wildcards always see complete data fixtures. Any structural
    problem raises a ``HarnessError`` from the constructor.
    """

    def __init__(
        self,
        schema_files: Iterable[Path],
        data_files: Iterable[Path],
        engine: SchemaEngine | None = None,
        known_failures: KnownFailureRegistry | None = None,
        reporter: Reporter | None = None,
        logger: HarnessLogger | None = None,
        encoded_entries: bool = False,
        run_id: UUID | None = None,
    ):
        self.run_id = run_id or uuid4()
        self.engine = engine or JsonSchemaEngine()
        self.known_failures = known_failures or KnownFailureRegistry()
        self.reporter = reporter or CollectingReporter()
        self.logger = logger or create_harness_logger(run_id=self.run_id)
        self.store = FixtureStore(encoded_entries=encoded_entries)

        with LoggingContextManager(self.logger, "Fixture loading"):
            self.store.load_data_fixtures(data_files)
            for name in self.store.data_names:
                self.logger.fixture_loaded("data", name, len(self.store.data_fixture(name).entries))

            self.store.load_schema_fixtures(schema_files)
            for spec in self.store.schema_fixtures():
                self.logger.fixture_loaded("schema", spec.name, len(spec.passes) + len(spec.fails))

        self.specs: list[ExpandedSpec] = ExpectationExpander(self.store).expand_all()
        for spec in self.specs:
            self.logger.spec_expanded(
                spec.name,
                sum(1 for _ in spec.expectations(Disposition.PASS)),
                sum(1 for _ in spec.expectations(Disposition.FAIL)),
            )

    @classmethod
    def from_config(
        cls,
        config: HarnessConfig,
        engine: SchemaEngine | None = None,
        reporter: Reporter | None = None,
        logger: HarnessLogger | None = None,
        run_id: UUID | None = None,
    ) -> "ConformanceHarness":
        """Build a harness from a resolved configuration."""
        known_failures = None
        if config.known_failures is not None:
            known_failures = KnownFailureRegistry.from_yaml(config.known_failures)

        run_id = run_id or uuid4()
        return cls(
            schema_files=config.schema_files(),
            data_files=config.data_files(),
            engine=engine or create_engine(config.engine),
            known_failures=known_failures,
            reporter=reporter,
            logger=logger or create_harness_logger(run_id=run_id, log_level=config.log_level),
            encoded_entries=config.encoded_entries,
            run_id=run_id,
        )

    def expectations(self) -> list[Expectation]:
        """Every expanded expectation, in run order."""
        return [expectation for spec in self.specs for expectation in spec.expectations()]

    def run(self, audit_log: AuditLog | None = None) -> RunSummary:
        """Run every expectation and return the summary."""
        if audit_log is not None:
            audit_log.log_event(
                "run_started",
                self.run_id,
                f"Running {len(self.specs)} schema specs with {self.engine.name}",
                details={"engine": self.engine.name, "specs": len(self.specs)},
            )

        runner = TestRunner(
            store=self.store,
            engine=self.engine,
            reporter=self.reporter,
            known_failures=self.known_failures,
            logger=self.logger,
        )

        with LoggingContextManager(self.logger, "Conformance run", engine=self.engine.name) as phase:
            summary = runner.run(self.specs)

        self.logger.run_completed(
            summary.total, summary.passed, summary.failed, summary.tolerated, phase.duration_ms
        )

        if audit_log is not None:
            for point in self.reporter.points:
                audit_log.log_point(self.run_id, point)
            audit_log.log_summary(self.run_id, summary, phase.duration_ms)
            audit_log.save()

        return summary
