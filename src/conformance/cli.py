"""Command line interface for the conformance harness."""

from pathlib import Path
from uuid import uuid4

import click

from .audit import AuditLog
from .config import HarnessConfig
from .errors import HarnessError
from .harness import ConformanceHarness
from .logging import create_harness_logger
from .reporting import CollectingReporter, TapReporter
from .types import EngineKind

EXIT_FAILURES = 1
EXIT_HARNESS_ERROR = 2


def _resolve_config(config_path: Path | None, **overrides) -> HarnessConfig:
    config = HarnessConfig.from_yaml(config_path) if config_path else HarnessConfig()
    return config.merged(**overrides)


def fixture_options(func):
    """Options shared by every command that loads fixtures."""
    func = click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                        help="YAML config file")(func)
    func = click.option("--data", "data_dir", type=click.Path(file_okay=False, path_type=Path),
                        help="Directory of data fixtures")(func)
    func = click.option("--schemas", "schema_dir", type=click.Path(file_okay=False, path_type=Path),
                        help="Directory of schema spec fixtures")(func)
    func = click.option("--encoded-entries", is_flag=True,
                        help="Data entries are JSON texts to decode before validation")(func)
    return func


@click.group()
@click.version_option(package_name="schema-conformance")
def main():
    """Schema conformance harness - check an engine against declarative fixtures."""
    pass


@main.command()
@fixture_options
@click.option("--known-failures", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML table of known failures")
@click.option("--engine", type=click.Choice([kind.value for kind in EngineKind]), default=None,
              help="Schema engine to test")
@click.option("--report", type=click.Path(dir_okay=False, path_type=Path), help="Write a JSONL run report")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              default=None, help="Log level for stderr logging")
@click.pass_context
def run(ctx, config_path, schema_dir, data_dir, encoded_entries, known_failures, engine, report, log_level):
    """Run every schema spec and print TAP results."""
    run_id = uuid4()
    audit_log = None
    logger = None
    try:
        config = _resolve_config(
            config_path,
            schema_dir=schema_dir,
            data_dir=data_dir,
            encoded_entries=encoded_entries or None,
            known_failures=known_failures,
            engine=engine,
            report=report,
            log_level=log_level,
        )
        if config.report is not None:
            audit_log = AuditLog(config.report)

        logger = create_harness_logger(run_id=run_id, log_level=config.log_level)
        harness = ConformanceHarness.from_config(config, reporter=TapReporter(), logger=logger, run_id=run_id)
        summary = harness.run(audit_log=audit_log)

    except HarnessError as e:
        click.echo(f"ERROR: {e}", err=True)
        if logger is not None:
            logger.error("Harness error", e)
        if audit_log is not None:
            audit_log.log_event("harness_error", run_id, str(e),
                                details={"error_type": type(e).__name__}, level="error")
            audit_log.save()
        ctx.exit(EXIT_HARNESS_ERROR)

    if summary.tolerated or summary.unexpectedly_passing:
        click.echo(
            f"# {summary.tolerated} known failure(s), "
            f"{summary.unexpectedly_passing} known failure(s) now passing"
        )
    if not summary.ok:
        ctx.exit(EXIT_FAILURES)


@main.command()
@fixture_options
@click.pass_context
def expand(ctx, config_path, schema_dir, data_dir, encoded_entries):
    """List every expanded expectation without running an engine."""
    try:
        config = _resolve_config(
            config_path, schema_dir=schema_dir, data_dir=data_dir, encoded_entries=encoded_entries or None
        )
        harness = ConformanceHarness(
            schema_files=config.schema_files(),
            data_files=config.data_files(),
            reporter=CollectingReporter(),
            logger=create_harness_logger(log_level=config.log_level),
            encoded_entries=config.encoded_entries,
        )
    except HarnessError as e:
        click.echo(f"ERROR: {e}", err=True)
        ctx.exit(EXIT_HARNESS_ERROR)

    expectations = harness.expectations()
    for expectation in expectations:
        line = f"{expectation.schema_name} {expectation.disposition.value} {expectation.input_desc}"
        if expectation.detail is not None:
            line += f" {expectation.detail.model_dump_json(exclude_none=True)}"
        click.echo(line)
    click.echo(f"[EXPAND] {len(expectations)} expectations in {len(harness.specs)} schema specs")


if __name__ == "__main__":
    main()
