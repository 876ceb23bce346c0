from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner, Result

from dirmark.cli.main import app

RUNNER = CliRunner()
pytestmark = pytest.mark.e2e


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    base = tmp_path.resolve()
    for name in ("home", "xdg-config", "dirs/project", "dirs/docs", "dirs/bulk/one", "dirs/bulk/two"):
        (base / name).mkdir(parents=True, exist_ok=True)
    (base / "dirs" / "bulk" / "notes.txt").write_text("not a directory", encoding="utf-8")
    return base


def _env(base: Path, **extra: str) -> dict[str, str]:
    return {
        "HOME": str(base / "home"),
        "XDG_CONFIG_HOME": str(base / "xdg-config"),
        "TO_CONFIG_FILE": "",
        "TO_CONFIG_META_FILE": "",
        "TO_USER_CONFIG_FILE": "",
        "TO_RECENT_FILE": "",
        "GOTO_ASSUME_YES": "",
        "NO_COLOR": "1",
        **extra,
    }


def _invoke(base: Path, args: list[str], **extra: str) -> Result:
    return RUNNER.invoke(app, args, env=_env(base, **extra))


def _entries(base: Path) -> str:
    return (base / "home" / ".goto" / "to_dirs").read_text(encoding="utf-8")


def test_add_then_list_and_path(workspace: Path) -> None:
    project = workspace / "dirs" / "project"

    added = _invoke(workspace, ["add", "proj", str(project)])
    listed = _invoke(workspace, ["list"])
    resolved = _invoke(workspace, ["path", "proj/src"])

    assert added.exit_code == 0, added.output
    assert "Added" in added.stdout
    assert _entries(workspace) == f"proj={project}\n"
    assert "proj" in listed.stdout
    assert str(project) in listed.stdout
    assert resolved.stdout.strip() == str(project / "src")


def test_add_uses_directory_name_when_keyword_is_omitted(workspace: Path) -> None:
    result = _invoke(workspace, ["add", str(workspace / "dirs" / "docs")])

    assert result.exit_code == 0, result.output
    assert _entries(workspace).startswith("docs=")


def test_add_existing_keyword_needs_force(workspace: Path) -> None:
    _invoke(workspace, ["add", "proj", str(workspace / "dirs" / "project")])

    conflict = _invoke(workspace, ["add", "proj", str(workspace / "dirs" / "docs")])
    forced = _invoke(workspace, ["add", "--force", "proj", str(workspace / "dirs" / "docs")])

    assert conflict.exit_code == 1
    assert "--force" in conflict.stderr
    assert forced.exit_code == 0
    assert _entries(workspace) == f"proj={workspace / 'dirs' / 'docs'}\n"


def test_duplicate_path_declined_without_terminal(workspace: Path) -> None:
    project = str(workspace / "dirs" / "project")
    _invoke(workspace, ["add", "proj", project])

    declined = _invoke(workspace, ["add", "again", project])
    accepted = _invoke(workspace, ["add", "again", project], GOTO_ASSUME_YES="yes")

    assert declined.exit_code == 1
    assert accepted.exit_code == 0, accepted.output
    assert "again=" in _entries(workspace)


def test_add_rejects_missing_directory(workspace: Path) -> None:
    result = _invoke(workspace, ["add", "ghost", str(workspace / "missing")])

    assert result.exit_code == 1
    assert "error:" in result.stderr


def test_copy_and_remove(workspace: Path) -> None:
    project = workspace / "dirs" / "project"
    _invoke(workspace, ["add", "proj", str(project)])

    copied = _invoke(workspace, ["copy", "--yes", "proj", "work"])
    removed = _invoke(workspace, ["rm", "proj"])
    missing = _invoke(workspace, ["rm", "proj"])

    assert copied.exit_code == 0, copied.output
    assert removed.exit_code == 0
    assert _entries(workspace) == f"work={project}\n"
    assert missing.exit_code == 1
    assert "not found" in missing.stderr


def test_jump_creates_missing_subdirectory_and_records_recency(workspace: Path) -> None:
    project = workspace / "dirs" / "project"
    _invoke(workspace, ["add", "proj", str(project)])

    result = _invoke(workspace, ["jump", "proj/new/child"])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == str(project / "new" / "child")
    assert (project / "new" / "child").is_dir()
    assert "Created" in result.stderr
    recency = (workspace / "home" / ".goto" / "to_dirs_recent").read_text(encoding="utf-8")
    assert recency.startswith("proj=")


def test_jump_no_create_fails_for_missing_target(workspace: Path) -> None:
    project = workspace / "dirs" / "project"
    _invoke(workspace, ["add", "proj", str(project)])

    result = _invoke(workspace, ["jump", "--no-create", "proj/absent"])

    assert result.exit_code == 1
    assert "does not exist" in result.stderr
    assert not (project / "absent").exists()


def test_jump_unknown_keyword(workspace: Path) -> None:
    result = _invoke(workspace, ["jump", "nowhere"])

    assert result.exit_code == 1
    assert "not found" in result.stderr


def test_add_bulk_skips_files(workspace: Path) -> None:
    result = _invoke(workspace, ["add-bulk", str(workspace / "dirs" / "bulk" / "*")])

    assert result.exit_code == 0, result.output
    entries = _entries(workspace)
    assert "one=" in entries
    assert "two=" in entries
    assert "notes.txt" not in entries


def test_sort_show_and_set(workspace: Path) -> None:
    shown = _invoke(workspace, ["sort"])
    changed = _invoke(workspace, ["sort", "Recent"])
    invalid = _invoke(workspace, ["sort", "shuffle"])

    assert "Current sorting mode: alpha" in shown.stdout
    assert "Sorting mode set to recent" in changed.stdout
    assert invalid.exit_code == 1
    preferences = (workspace / "home" / ".goto" / "to_zsh_config").read_text(encoding="utf-8")
    assert preferences == "sort_order=recent\n"


def test_search_by_path_and_json_output(workspace: Path) -> None:
    _invoke(workspace, ["add", "proj", str(workspace / "dirs" / "project")])
    _invoke(workspace, ["add", "docs", str(workspace / "dirs" / "docs")])

    by_path = _invoke(workspace, ["search", "--path", "project"])
    as_json = _invoke(workspace, ["search", "--json", "doc"])
    nothing = _invoke(workspace, ["search", "zzz"])

    assert "proj" in by_path.stdout
    assert "docs" not in by_path.stdout
    payload = json.loads(as_json.stdout)
    assert payload == [{"keyword": "docs", "path": str(workspace / "dirs" / "docs"), "expiry": None}]
    assert "No matching shortcuts." in nothing.stdout


def test_search_rejects_bad_regex(workspace: Path) -> None:
    result = _invoke(workspace, ["search", "--regex", "(open"])

    assert result.exit_code == 1
    assert "error:" in result.stderr


def test_complete_keywords_and_targets(workspace: Path) -> None:
    project = workspace / "dirs" / "project"
    (project / "src").mkdir()
    (project / "setup.cfg").write_text("", encoding="utf-8")
    _invoke(workspace, ["add", "proj", str(project)])
    _invoke(workspace, ["add", "docs", str(workspace / "dirs" / "docs")])

    keywords = _invoke(workspace, ["complete", "keywords", "pr"])
    targets = _invoke(workspace, ["complete", "targets", "proj/s"])

    assert keywords.stdout.splitlines() == ["proj"]
    assert targets.stdout.splitlines() == ["proj/setup.cfg", "proj/src/"]


def test_no_subcommand_prints_help_and_saved_shortcuts(workspace: Path) -> None:
    _invoke(workspace, ["add", "proj", str(workspace / "dirs" / "project")])

    result = _invoke(workspace, [])

    assert result.exit_code == 0
    assert "Usage" in result.stdout
    assert "Saved shortcuts:" in result.stdout
    assert "Current sorting mode: alpha" in result.stdout


def test_expired_entries_are_dropped_on_next_run(workspace: Path) -> None:
    _invoke(workspace, ["add", "--expire", "1", "old", str(workspace / "dirs" / "docs")])
    _invoke(workspace, ["add", "proj", str(workspace / "dirs" / "project")])

    assert "old" not in _invoke(workspace, ["list"]).stdout
    assert "old=" not in _entries(workspace)


def test_copy_to_tilde_keyword_and_add_with_unknown_user(workspace: Path) -> None:
    project = workspace / "dirs" / "project"
    _invoke(workspace, ["add", "proj", str(project)])

    copied = _invoke(workspace, ["copy", "--yes", "proj", "~nosuchuserxyz"])
    unknown_user = _invoke(workspace, ["add", "ghost", "~nosuchuserxyz/code"])

    assert copied.exit_code == 0, copied.output
    assert f"~nosuchuserxyz={project}" in _entries(workspace)
    assert unknown_user.exit_code == 1
    assert "error:" in unknown_user.stderr
