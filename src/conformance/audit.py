"""Audit report for harness runs."""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from uuid import UUID

from .types import RunEvent, RunSummary, TestPoint


class AuditLog:
    """JSONL audit log of run events and recorded test points."""

    def __init__(self, log_file: Path = None):
        """Initialize audit log with file path."""
        if log_file is None:
            log_file = Path("conformance-report.jsonl")
        self.log_file = log_file
        self.events: List[RunEvent] = []

    def append(self, event: RunEvent) -> None:
        """Append an event to the audit log."""
        self.events.append(event)

    def log_event(
        self,
        event_type: str,
        run_id: UUID,
        note: str,
        details: dict = None,
        level: str = "info"
    ) -> None:
        """Log an event with current timestamp."""
        event = RunEvent(
            event_type=event_type,
            timestamp=datetime.utcnow(),
            run_id=run_id,
            note=note,
            level=level,
            details=details or {}
        )
        self.append(event)

    def log_point(self, run_id: UUID, point: TestPoint) -> None:
        """Record one test point."""
        self.log_event(
            "test_point",
            run_id,
            point.description,
            details=point.model_dump(),
            level="info" if point.ok or point.tolerated else "error",
        )

    def log_summary(self, run_id: UUID, summary: RunSummary, duration_ms: Optional[int] = None) -> None:
        details = summary.model_dump()
        details["ok"] = summary.ok
        details["duration_ms"] = duration_ms
        self.log_event(
            "run_completed",
            run_id,
            f"{summary.passed}/{summary.total} checks passed",
            details=details,
            level="info" if summary.ok else "error",
        )

    def save(self) -> Path:
        """Save audit log to JSONL file."""
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.log_file, 'w') as f:
            for event in self.events:
                event_dict = event.model_dump()
                event_dict['timestamp'] = event.timestamp.isoformat() + 'Z'
                event_dict['run_id'] = str(event.run_id)

                f.write(json.dumps(event_dict) + '\n')

        return self.log_file
