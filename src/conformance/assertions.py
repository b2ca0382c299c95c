"""Assertions run for each expectation."""

from typing import Any

from .logging import HarnessLogger
from .reporting import Reporter
from .types import Accepted, ExpectedDetail, Rejected, ValidationOutcome, format_path
from .validation import SchemaEngine


class AssertionEngine:
    """Checks engine outcomes against expectations and records test points."""

    def __init__(self, engine: SchemaEngine, reporter: Reporter, logger: HarnessLogger | None = None):
        self.engine = engine
        self.reporter = reporter
        self.logger = logger

    def _invoke(self, schema: Any, value: Any, input_desc: str) -> ValidationOutcome | Exception:
        """Run the engine. An engine crash is returned as an unstructured rejection."""
        try:
            return self.engine.validate(schema, value)
        except Exception as e:
            if self.logger:
                self.logger.engine_crashed(self.engine.name, input_desc, e)
            return e

    def assert_pass(self, schema: Any, schema_desc: str, value: Any, input_desc: str) -> bool:
        """Expect the value to be accepted."""
        outcome = self._invoke(schema, value, input_desc)
        description = f"VALID  : {input_desc} against {schema_desc}"

        if isinstance(outcome, Accepted):
            self.reporter.ok(True, description)
            return True

        if isinstance(outcome, Rejected):
            diagnostics = outcome.diagnostics()
        else:
            diagnostics = [f"engine raised {type(outcome).__name__}: {outcome}"]
        self.reporter.ok(False, description, diagnostics)
        return False

    def assert_fail(
        self,
        schema: Any,
        schema_desc: str,
        value: Any,
        input_desc: str,
        want: ExpectedDetail | None = None,
    ) -> bool:
        """Expect the value to be rejected, then check the rejection details."""
        outcome = self._invoke(schema, value, input_desc)
        description = f"INVALID: {input_desc} against {schema_desc}"

        if isinstance(outcome, Accepted):
            self.reporter.ok(False, description, ["value was accepted"])
            return False

        self.reporter.ok(True, description)

        structured = isinstance(outcome, Rejected)
        self.reporter.ok(
            structured,
            "...rejection",
            [] if structured else [f"engine raised {type(outcome).__name__}: {outcome}"],
        )
        if not structured:
            return False

        want = want or ExpectedDetail()
        all_ok = True

        if want.value is not None:
            all_ok &= self.reporter.is_deeply(
                outcome.path_to_value, want.value, f"...value: {format_path(want.value)}"
            ).ok

        if want.check is not None:
            all_ok &= self.reporter.is_deeply(
                outcome.path_to_check, want.check, f"...check: {format_path(want.check)}"
            ).ok

        if want.error is not None:
            expected = sorted(want.error)
            all_ok &= self.reporter.is_deeply(
                sorted(outcome.failure_types),
                expected,
                f"...failure type(s): {' '.join(expected)}",
            ).ok

        return all_ok
