"""Test reporters that record individual check results."""

import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, TextIO

import click

from .types import RunSummary, TestPoint


class Reporter(ABC):
    """Records test points and hands each one to ``emit``."""

    def __init__(self):
        self.points: list[TestPoint] = []
        self._todo: str | None = None

    @contextmanager
    def todo(self, reason: str | None) -> Iterator[None]:
        """Mark every point recorded inside the block as a known failure."""
        previous = self._todo
        self._todo = reason
        try:
            yield
        finally:
            self._todo = previous

    def ok(self, passed: bool, description: str, diagnostics: list[str] | None = None) -> TestPoint:
        """Record a point."""
        point = TestPoint(
            number=len(self.points) + 1,
            ok=bool(passed),
            description=description,
            todo=self._todo,
            diagnostics=diagnostics or [],
        )
        self.points.append(point)
        self.emit(point)
        return point

    def is_deeply(self, got: Any, expected: Any, description: str) -> TestPoint:
        """Record whether two structures are equal, with got/expected on mismatch."""
        diagnostics = []
        if got != expected:
            diagnostics = [f"     got: {got!r}", f"expected: {expected!r}"]
        return self.ok(got == expected, description, diagnostics)

    def summary(self) -> RunSummary:
        summary = RunSummary(total=len(self.points))
        for point in self.points:
            if point.ok:
                summary.passed += 1
                if point.todo is not None:
                    summary.unexpectedly_passing += 1
            elif point.tolerated:
                summary.tolerated += 1
            else:
                summary.failed += 1
        return summary

    @abstractmethod
    def emit(self, point: TestPoint) -> None:
        """Publish a freshly recorded point."""
        pass

    def finish(self) -> RunSummary:
        """Close the run and return its summary."""
        return self.summary()


class CollectingReporter(Reporter):
    """Keeps points in memory only."""

    def emit(self, point: TestPoint) -> None:
        pass

    def descriptions(self) -> list[str]:
        return [point.description for point in self.points]

    def failures(self) -> list[TestPoint]:
        return [point for point in self.points if not point.ok]


class TapReporter(Reporter):
    """Writes points as TAP (Test Anything Protocol) lines."""

    def __init__(self, stream: TextIO | None = None):
        super().__init__()
        self.stream = stream or sys.stdout

    def _echo(self, line: str) -> None:
        click.echo(line, file=self.stream)

    def emit(self, point: TestPoint) -> None:
        line = f"{'ok' if point.ok else 'not ok'} {point.number} - {point.description}"
        if point.todo is not None:
            line += f" # TODO {point.todo}"
        self._echo(line)

        if not point.ok:
            self._echo(f"#   Failed {'(TODO) ' if point.todo else ''}test '{point.description}'")
            for diagnostic in point.diagnostics:
                self._echo(f"#   {diagnostic}")

    def finish(self) -> RunSummary:
        summary = super().finish()
        self._echo(f"1..{summary.total}")
        if summary.failed:
            self._echo(f"# Looks like you failed {summary.failed} test(s) of {summary.total}.")
        return summary
