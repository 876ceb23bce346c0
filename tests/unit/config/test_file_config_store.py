from __future__ import annotations

from pathlib import Path

import pytest

from dirmark.common import AppPaths
from dirmark.config import (
    ConfigIOError,
    ConfigValidationError,
    ConfigYamlError,
    DirmarkConfig,
    FileConfigStore,
)


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path / "xdg" / "dirmark" / "config.yaml"


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_missing_file_yields_defaults(config_file: Path) -> None:
    config = FileConfigStore(AppPaths()).load().unwrap()

    assert FileConfigStore(AppPaths()).config_file == config_file
    assert config == DirmarkConfig()


def test_logging_section_is_loaded(config_file: Path) -> None:
    _write(config_file, "logging:\n  log_level: DEBUG\n  format: json\n")

    config = FileConfigStore(AppPaths()).load().unwrap()

    assert config.logging.log_level == "DEBUG"
    assert config.logging.format == "json"


def test_empty_file_yields_defaults(config_file: Path) -> None:
    _write(config_file, "")

    assert FileConfigStore(AppPaths()).load().unwrap() == DirmarkConfig()


def test_invalid_yaml_reports_position(config_file: Path) -> None:
    _write(config_file, "logging:\n  log_level: [unclosed\n")

    error = FileConfigStore(AppPaths()).load().unwrap_err()

    assert isinstance(error, ConfigYamlError)
    assert error.path == config_file
    assert error.line is not None


def test_non_mapping_root_is_rejected(config_file: Path) -> None:
    _write(config_file, "- just\n- a list\n")

    error = FileConfigStore(AppPaths()).load().unwrap_err()

    assert isinstance(error, ConfigValidationError)
    assert "mapping" in error.message


def test_unknown_logging_key_is_a_validation_error(config_file: Path) -> None:
    _write(config_file, "logging:\n  verbosity: 3\n")

    error = FileConfigStore(AppPaths()).load().unwrap_err()

    assert isinstance(error, ConfigValidationError)
    assert error.field == "logging.verbosity"


def test_undecodable_config_is_an_io_error(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_bytes(b"\xff\xfe\x00bad")

    result = FileConfigStore(AppPaths(), config_file=config_file).load()

    assert result.is_err()
    assert isinstance(result.unwrap_err(), ConfigIOError)


def test_env_overrides_apply_on_top_of_file(config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(config_file, "logging:\n  enabled: true\n")
    monkeypatch.setenv("DIRMARK_CONFIG__LOGGING__ENABLED", "false")

    config = FileConfigStore(AppPaths()).load().unwrap()

    assert config.logging.enabled is False
