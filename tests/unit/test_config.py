"""Unit tests for harness configuration."""

from pathlib import Path

import pytest

from conformance.config import HarnessConfig, discover_fixture_files
from conformance.errors import DeclarationError, FixtureLoadError
from conformance.types import EngineKind


def test_defaults():
    config = HarnessConfig()
    assert config.engine is EngineKind.JSONSCHEMA
    assert config.encoded_entries is False
    assert config.log_level == "WARNING"


def test_from_yaml_resolves_relative_paths(tmp_path):
    config_file = tmp_path / "harness.yaml"
    config_file.write_text(
        "schema_dir: spec/schemata\n"
        "data_dir: spec/data\n"
        "known_failures: fudge.yaml\n"
        "engine: stub\n"
        "encoded_entries: true\n"
    )

    config = HarnessConfig.from_yaml(config_file)

    assert config.schema_dir == tmp_path / "spec" / "schemata"
    assert config.data_dir == tmp_path / "spec" / "data"
    assert config.known_failures == tmp_path / "fudge.yaml"
    assert config.engine is EngineKind.STUB
    assert config.encoded_entries is True


def test_from_yaml_rejects_unknown_engine(tmp_path):
    config_file = tmp_path / "harness.yaml"
    config_file.write_text("engine: perl\n")
    with pytest.raises(DeclarationError):
        HarnessConfig.from_yaml(config_file)


def test_from_yaml_rejects_non_mapping(tmp_path):
    config_file = tmp_path / "harness.yaml"
    config_file.write_text("- a\n- b\n")
    with pytest.raises(DeclarationError):
        HarnessConfig.from_yaml(config_file)


def test_merged_ignores_none_overrides():
    config = HarnessConfig(schema_dir=Path("s"), engine=EngineKind.STUB)

    merged = config.merged(schema_dir=None, data_dir=Path("d"), engine="jsonschema")

    assert merged.schema_dir == Path("s")
    assert merged.data_dir == Path("d")
    assert merged.engine is EngineKind.JSONSCHEMA


def test_directories_are_required():
    with pytest.raises(DeclarationError):
        HarnessConfig(schema_dir=Path("s")).schema_files()


def test_discover_fixture_files_sorted_and_recursive(tmp_path):
    (tmp_path / "nested").mkdir()
    for name in ["b.json", "a.json", "nested/c.json", "notes.txt"]:
        (tmp_path / name).write_text("{}")

    files = discover_fixture_files(tmp_path)

    assert [f.relative_to(tmp_path).as_posix() for f in files] == ["a.json", "b.json", "nested/c.json"]


def test_discover_missing_directory(tmp_path):
    with pytest.raises(FixtureLoadError):
        discover_fixture_files(tmp_path / "missing")
