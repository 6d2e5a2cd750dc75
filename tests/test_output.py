"""Tests for output module."""

import sys
from unittest.mock import patch

from livenotes.codec import ProjectData
from livenotes.output import build_markdown, copy_to_clipboard, save_notes

ANCHOR = 1_700_000_000_000


def _project() -> ProjectData:
    return ProjectData.from_state(
        ["Intro", "", "Budget\nsecond line", "Loose note"],
        {0: ANCHOR + 1000, 2: ANCHOR + 65_000},
        {2: "Bob"},
        ANCHOR,
    )


class TestBuildMarkdown:
    def test_contains_front_matter(self):
        md = build_markdown(_project(), title="Weekly sync")
        assert md.startswith("---")
        assert "title: Weekly sync" in md
        assert "timestamps: 2" in md
        assert "## Notes" in md

    def test_lines_carry_time_and_speaker(self):
        md = build_markdown(_project())
        assert "- [00:00:01] Intro" in md
        assert "- [00:01:05] **Bob:** Budget\n  second line" in md
        assert "- Loose note" in md

    def test_skips_empty_blocks(self):
        md = build_markdown(_project())
        notes = md.split("## Notes", 1)[1]
        assert "- \n" not in notes
        assert notes.count("\n- ") == 3


class TestSaveNotes:
    def test_writes_file(self, tmp_path):
        path = save_notes(_project(), tmp_path / "out" / "notes.md", title="T")
        assert path.exists()
        assert "Budget" in path.read_text(encoding="utf-8")


class TestClipboard:
    def test_copy_success(self):
        fake = type(sys)("pyperclip")
        fake.copy = lambda text: None
        with patch.dict(sys.modules, {"pyperclip": fake}):
            assert copy_to_clipboard("hello") is True

    def test_copy_failure_is_absorbed(self):
        fake = type(sys)("pyperclip")

        def _boom(text):
            raise RuntimeError("no clipboard")

        fake.copy = _boom
        with patch.dict(sys.modules, {"pyperclip": fake}):
            assert copy_to_clipboard("hello") is False
