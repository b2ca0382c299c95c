"""Unit tests for CLI module."""

import json

from click.testing import CliRunner

from conformance.cli import main


def write_suite(tmp_path, schemata, data):
    schema_dir = tmp_path / "schemata"
    data_dir = tmp_path / "data"
    schema_dir.mkdir()
    data_dir.mkdir()
    for name, content in schemata.items():
        (schema_dir / f"{name}.json").write_text(json.dumps(content))
    for name, content in data.items():
        (data_dir / f"{name}.json").write_text(json.dumps(content))
    return schema_dir, data_dir


STR_SPEC = {"schema": {"type": "str"}, "pass": {"strings": "*"}, "fail": {"numbers": "*"}}
DATA = {"strings": {"a": "a", "b": "b"}, "numbers": {"one": 1, "two": 2}}


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Schema conformance harness" in result.output


def test_run_command_help():
    runner = CliRunner()
    result = runner.invoke(main, ["run", "--help"])
    assert result.exit_code == 0
    assert "--known-failures" in result.output


def test_run_passing_suite(tmp_path):
    schema_dir, data_dir = write_suite(tmp_path, {"str": STR_SPEC}, DATA)

    runner = CliRunner()
    result = runner.invoke(main, ["run", "--schemas", str(schema_dir), "--data", str(data_dir), "--engine", "stub"])

    assert result.exit_code == 0
    assert "ok 1 - VALID  : strings/a against str" in result.output
    assert "ok 3 - INVALID: numbers/one against str" in result.output
    assert "1..6" in result.output


def test_run_failing_suite_exits_one(tmp_path):
    spec = {"schema": {"type": "num"}, "pass": {"strings": ["a"]}}
    schema_dir, data_dir = write_suite(tmp_path, {"num": spec}, DATA)

    runner = CliRunner()
    result = runner.invoke(main, ["run", "--schemas", str(schema_dir), "--data", str(data_dir), "--engine", "stub"])

    assert result.exit_code == 1
    assert "not ok 1 - VALID  : strings/a against num" in result.output


def test_run_known_failures_exit_zero(tmp_path):
    spec = {"schema": {"type": "num"}, "pass": {"strings": ["a"]}}
    schema_dir, data_dir = write_suite(tmp_path, {"num": spec}, DATA)
    known = tmp_path / "known_failures.yaml"
    known.write_text("num:\n  strings: strings are not numbers yet\n")

    runner = CliRunner()
    result = runner.invoke(main, [
        "run", "--schemas", str(schema_dir), "--data", str(data_dir),
        "--engine", "stub", "--known-failures", str(known),
    ])

    assert result.exit_code == 0
    assert "# TODO strings are not numbers yet" in result.output


def test_run_harness_error_exits_two(tmp_path):
    spec = {"schema": {"type": "str"}, "pass": {"missing": "*"}}
    schema_dir, data_dir = write_suite(tmp_path, {"str": spec}, DATA)

    runner = CliRunner()
    result = runner.invoke(main, ["run", "--schemas", str(schema_dir), "--data", str(data_dir), "--engine", "stub"])

    assert result.exit_code == 2
    assert "ERROR: no such test data: missing" in result.output


def test_run_without_directories(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["run"])
    assert result.exit_code == 2
    assert "ERROR:" in result.output


def test_run_writes_report(tmp_path):
    schema_dir, data_dir = write_suite(tmp_path, {"str": STR_SPEC}, DATA)
    report = tmp_path / "out" / "report.jsonl"

    runner = CliRunner()
    result = runner.invoke(main, [
        "run", "--schemas", str(schema_dir), "--data", str(data_dir),
        "--engine", "stub", "--report", str(report),
    ])

    assert result.exit_code == 0
    events = [json.loads(line) for line in report.read_text().splitlines()]
    assert events[0]["event_type"] == "run_started"
    assert [e["event_type"] for e in events[1:-1]] == ["test_point"] * 6
    assert events[-1]["event_type"] == "run_completed"
    assert events[-1]["details"]["ok"] is True


def test_run_report_records_harness_error(tmp_path):
    schema_dir, data_dir = write_suite(tmp_path, {"str": {"schema": "broken-def", "pass": {}}}, DATA)
    report = tmp_path / "report.jsonl"

    runner = CliRunner()
    result = runner.invoke(main, [
        "run", "--schemas", str(schema_dir), "--data", str(data_dir),
        "--engine", "stub", "--report", str(report),
    ])

    assert result.exit_code == 2
    events = [json.loads(line) for line in report.read_text().splitlines()]
    assert events[-1]["event_type"] == "harness_error"
    assert events[-1]["details"]["error_type"] == "SchemaBuildError"
    assert events[0]["event_type"] == "run_started"
    assert len({event["run_id"] for event in events}) == 1


def test_run_with_config_file(tmp_path):
    write_suite(tmp_path, {"str": STR_SPEC}, DATA)
    config = tmp_path / "harness.yaml"
    config.write_text("schema_dir: schemata\ndata_dir: data\nengine: stub\n")

    runner = CliRunner()
    result = runner.invoke(main, ["run", "--config", str(config)])

    assert result.exit_code == 0
    assert "1..6" in result.output


def test_expand_lists_expectations(tmp_path):
    spec = {
        "schema": {"type": "str"},
        "pass": {"strings": "*"},
        "fail": {"numbers": {"*": {"error": ["type"]}}},
    }
    schema_dir, data_dir = write_suite(tmp_path, {"str": spec}, DATA)

    runner = CliRunner()
    result = runner.invoke(main, ["expand", "--schemas", str(schema_dir), "--data", str(data_dir)])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "str pass strings/a" in lines
    assert 'str fail numbers/one {"error":["type"]}' in lines
    assert "[EXPAND] 4 expectations in 1 schema specs" in lines


def test_expand_reports_malformed_declaration(tmp_path):
    spec = {"schema": {}, "fail": {"numbers": 3}}
    schema_dir, data_dir = write_suite(tmp_path, {"bad": spec}, DATA)

    runner = CliRunner()
    result = runner.invoke(main, ["expand", "--schemas", str(schema_dir), "--data", str(data_dir)])

    assert result.exit_code == 2
    assert "invalid test spec" in result.output
