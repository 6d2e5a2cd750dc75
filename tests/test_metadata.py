"""Tests for timeline metadata."""

from livenotes.metadata import build_timeline

ANCHOR = 1_700_000_000_000


class TestBuildTimeline:
    def _entries(self, duration_ms=None):
        blocks = ["Intro", "", "Budget"]
        timestamps = {0: ANCHOR + 1000, 1: ANCHOR + 2000, 2: ANCHOR + 5000}
        return build_timeline(blocks, timestamps, {2: "Bob"}, ANCHOR, duration_ms)

    def test_skips_empty_blocks(self):
        entries = self._entries()
        assert [e.text for e in entries] == ["Intro", "Budget"]
        assert [e.index for e in entries] == [0, 1]
        assert [e.block for e in entries] == [0, 2]

    def test_start_end_relative_to_anchor(self):
        first, last = self._entries()
        assert first.start == "00:00:01.0000000"
        assert first.end == "00:00:02.0000000"
        assert last.start == "00:00:05.0000000"
        assert last.end == "00:00:08.0000000"
        assert last.speaker == "Bob"
        assert first.speaker == ""

    def test_end_clamped_to_duration(self):
        last = self._entries(duration_ms=6000)[-1]
        assert last.end == "00:00:06.0000000"

    def test_sorted_by_time_not_position(self):
        entries = build_timeline(["late", "early"], {0: ANCHOR + 9000, 1: ANCHOR + 1000}, {}, ANCHOR)
        assert [e.text for e in entries] == ["early", "late"]

    def test_without_anchor(self):
        (entry,) = build_timeline(["x"], {0: 5000}, None, 0)
        assert entry.start == "00:00:00.0000000"
        assert entry.end == "00:00:03.0000000"
        assert entry.to_dict()["text"] == "x"
