"""Tests for CLI commands on backup-format files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("rich")

from click.testing import CliRunner

from livenotes import cli
from livenotes.codec import ProjectData


@pytest.fixture(autouse=True)
def _no_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


def _write(tmp_path: Path, project: ProjectData) -> Path:
    path = tmp_path / "meeting.json"
    path.write_text(json.dumps(project.to_dict()), encoding="utf-8")
    return path


def _project() -> ProjectData:
    return ProjectData.from_state(["Intro", "Budget"], {0: 2000, 1: 7000}, {1: "Bob"}, 1000)


def test_show_lists_blocks(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.main, ["show", str(_write(tmp_path, _project()))])
    assert result.exit_code == 0
    assert "Budget" in result.output
    assert "00:00:06" in result.output
    assert "2 block(s), 2 timestamp(s)" in result.output


def test_check_ok(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.main, ["check", str(_write(tmp_path, _project()))])
    assert result.exit_code == 0
    assert "OK" in result.output


def test_check_reports_mismatch(tmp_path: Path) -> None:
    project = ProjectData("ab§§§cd", [(0, 1), (3, 2)], [], 0)
    result = CliRunner().invoke(cli.main, ["check", str(_write(tmp_path, project))])
    assert result.exit_code == 1
    assert "unmatched" in result.output


def test_export_writes_markdown(tmp_path: Path) -> None:
    out = tmp_path / "notes.md"
    result = CliRunner().invoke(cli.main, ["export", str(_write(tmp_path, _project())), "-o", str(out)])
    assert result.exit_code == 0
    assert "**Bob:** Budget" in out.read_text(encoding="utf-8")


def test_timeline_prints_json(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.main, ["timeline", str(_write(tmp_path, _project()))])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [e["text"] for e in data] == ["Intro", "Budget"]


def test_unreadable_file_exits(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    result = CliRunner().invoke(cli.main, ["show", str(bad)])
    assert result.exit_code == 1


def test_resolve_export_path_prefers_explicit(tmp_path: Path) -> None:
    explicit = str(tmp_path / "x.md")
    assert cli._resolve_export_path(Path("meeting.json"), explicit) == Path(explicit)


def test_resolve_export_path_uses_config(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "load_config", lambda: {"export_folder": str(tmp_path)})
    assert cli._resolve_export_path(Path("a/meeting.json"), None) == tmp_path / "meeting.md"


def test_edit_live_opens_editor(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(cli, "_open_editor", lambda project, live, title: calls.append((project, live, title)))
    result = CliRunner().invoke(cli.main, ["edit", "--live", "-t", "Standup"])
    assert result.exit_code == 0
    assert calls == [(None, True, "Standup")]


def test_edit_file_opens_loaded(monkeypatch, tmp_path: Path) -> None:
    calls = []
    monkeypatch.setattr(cli, "_open_editor", lambda project, live, title: calls.append((project, live, title)))
    result = CliRunner().invoke(cli.main, ["edit", str(_write(tmp_path, _project()))])
    assert result.exit_code == 0
    assert calls == [(_project(), False, "meeting")]
