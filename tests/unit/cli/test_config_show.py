from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from dirmark.cli.main import app

runner = CliRunner()


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _env(base: Path) -> dict[str, str]:
    return {
        "HOME": str(base / "home"),
        "XDG_CONFIG_HOME": str(base / "xdg"),
        "TO_CONFIG_FILE": "",
        "TO_CONFIG_META_FILE": "",
        "TO_USER_CONFIG_FILE": "",
        "TO_RECENT_FILE": "",
    }


def test_config_show_yaml() -> None:
    with runner.isolated_filesystem():
        base = Path.cwd()
        _write(base / "xdg" / "dirmark" / "config.yaml", "logging:\n  log_level: DEBUG\n")

        result = runner.invoke(app, ["config", "show"], env=_env(base))

        assert result.exit_code == 0
        payload = yaml.safe_load(result.stdout)
        assert payload["logging"]["log_level"] == "DEBUG"
        assert payload["files"]["entries"] == str(base / "home" / ".goto" / "to_dirs")
        assert payload["files"]["config"] == str(base / "xdg" / "dirmark" / "config.yaml")


def test_config_show_json_with_env() -> None:
    with runner.isolated_filesystem():
        base = Path.cwd()
        env = _env(base) | {
            "DIRMARK_CONFIG__LOGGING__ENABLED": "false",
            "TO_RECENT_FILE": str(base / "recent"),
        }

        result = runner.invoke(app, ["config", "show", "--format", "json"], env=env)

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["logging"]["enabled"] is False
        assert payload["files"]["recency"] == str(base / "recent")


def test_config_show_reports_invalid_yaml() -> None:
    with runner.isolated_filesystem():
        base = Path.cwd()
        _write(base / "xdg" / "dirmark" / "config.yaml", "logging: [\n")

        result = runner.invoke(app, ["config", "show"], env=_env(base))

        assert result.exit_code == 1
        assert "error:" in result.stderr
