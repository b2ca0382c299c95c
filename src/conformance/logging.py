"""Structured logging for harness runs."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog


class HarnessLogger:
    """Structured logger for fixture loading and check execution."""

    def __init__(
        self,
        log_level: str = "WARNING",
        enable_console: bool = True,
        log_file: Path | None = None,
        run_id: UUID | None = None,
    ):
        """Initialize harness logger.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            enable_console: Whether to render human readable console output
            log_file: Optional file path for log output
            run_id: Optional run ID for correlation
        """
        self.run_id = run_id
        self.log_file = log_file
        self._configure_logging(log_level, enable_console, log_file)
        self.logger = structlog.get_logger("conformance")

    def _configure_logging(
        self, log_level: str, enable_console: bool, log_file: Path | None
    ) -> None:
        """Configure structlog with processors and outputs."""
        level = getattr(logging, log_level.upper())

        # stdout is reserved for TAP output
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(str(log_file)))

        logging.basicConfig(format="%(message)s", level=level, handlers=handlers, force=True)

        processors = [
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            self._add_run_id,
            lambda _, __, event_dict: {
                k: v for k, v in event_dict.items() if v is not None
            },
        ]

        if log_level.upper() == "DEBUG":
            processors.append(
                structlog.processors.CallsiteParameterAdder(
                    parameters=[
                        structlog.processors.CallsiteParameter.FUNC_NAME,
                        structlog.processors.CallsiteParameter.LINENO,
                    ]
                )
            )

        if enable_console:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))
        else:
            processors.append(structlog.processors.JSONRenderer())

        structlog.configure(
            processors=processors,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )

    def _add_run_id(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        """Add run_id to log events if available."""
        if self.run_id:
            event_dict["run_id"] = str(self.run_id)
        return event_dict

    def fixture_loaded(self, kind: str, name: str, entries: int) -> None:
        self.logger.debug(
            "Fixture loaded",
            operation="load",
            kind=kind,
            fixture=name,
            entries=entries,
            stage="load",
        )

    def spec_expanded(self, spec_name: str, passes: int, fails: int) -> None:
        self.logger.debug(
            "Schema spec expanded",
            operation="expand",
            spec_name=spec_name,
            passes=passes,
            fails=fails,
            stage="expand",
        )

    def schema_built(self, spec_name: str, engine: str) -> None:
        self.logger.debug(
            "Schema built",
            operation="make_schema",
            spec_name=spec_name,
            engine=engine,
            stage="run",
        )

    def schema_build_failed(self, spec_name: str, error: str, expected: bool) -> None:
        """Log a schema that did not build; expected for specs marked invalid."""
        log_func = self.logger.debug if expected else self.logger.error
        log_func(
            "Schema construction failed",
            operation="make_schema",
            spec_name=spec_name,
            error=error,
            expected=expected,
            stage="run",
        )

    def entry_checked(
        self, spec_name: str, input_desc: str, disposition: str, ok: bool, todo: str | None = None
    ) -> None:
        self.logger.debug(
            "Entry checked",
            operation="check",
            spec_name=spec_name,
            input=input_desc,
            disposition=disposition,
            result="ok" if ok else "not ok",
            todo=todo,
            stage="run",
        )

    def engine_crashed(self, engine: str, input_desc: str, error: Exception) -> None:
        self.logger.error(
            "Engine raised instead of returning an outcome",
            operation="validate",
            engine=engine,
            input=input_desc,
            error_type=type(error).__name__,
            error_message=str(error),
            stage="run",
        )

    def run_completed(
        self, total: int, passed: int, failed: int, tolerated: int, duration_ms: int
    ) -> None:
        log_func = self.logger.info if failed == 0 else self.logger.warning
        log_func(
            "Run completed",
            operation="run",
            total=total,
            passed=passed,
            failed=failed,
            tolerated=tolerated,
            duration_ms=duration_ms,
            stage="run",
            status="success" if failed == 0 else "failure",
        )

    def error(
        self, message: str, error: Exception = None, context: dict[str, Any] = None
    ) -> None:
        """Log errors with context."""
        error_info = {}
        if error:
            error_info = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }

        self.logger.error(
            message, error_info=error_info, context=context or {}, status="error"
        )

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(message, **kwargs)


class LoggingContextManager:
    """Context manager that times a harness phase."""

    def __init__(self, logger: HarnessLogger, operation: str, **kwargs):
        """Initialize context manager.

        Args:
            logger: Harness logger instance
            operation: Operation name for logging
            **kwargs: Additional context for logging
        """
        self.logger = logger
        self.operation = operation
        self.context = kwargs
        self.start_time = None
        self.duration_ms = 0

    def __enter__(self):
        self.start_time = datetime.utcnow()
        self.logger.debug(f"{self.operation} started", **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        end_time = datetime.utcnow()
        self.duration_ms = int((end_time - self.start_time).total_seconds() * 1000)

        if exc_type is None:
            self.logger.debug(
                f"{self.operation} completed",
                duration_ms=self.duration_ms,
                status="success",
                **self.context,
            )
        else:
            context_with_error = {
                **self.context,
                "duration_ms": self.duration_ms,
                "status": "error",
                "error_type": exc_type.__name__,
                "error_message": str(exc_val),
            }
            self.logger.error(f"{self.operation} failed", context=context_with_error)


def create_harness_logger(
    run_id: UUID = None,
    log_level: str = "WARNING",
    enable_console: bool = True,
    log_file: Path | None = None,
) -> HarnessLogger:
    """Create and configure a harness logger instance.

    Args:
        run_id: Run ID for correlation
        log_level: Logging level
        enable_console: Whether to enable console output
        log_file: Optional log file path

    Returns:
        Configured harness logger instance
    """
    return HarnessLogger(
        log_level=log_level,
        enable_console=enable_console,
        log_file=log_file,
        run_id=run_id,
    )
