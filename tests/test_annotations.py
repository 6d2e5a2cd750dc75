"""Tests for annotation re-keying and split interpolation."""

from livenotes.annotations import AnnotationIndex


class TestShiftFrom:
    def test_insertion_shifts_keys_at_and_after(self):
        ann = AnnotationIndex({0: 10, 1: 20, 2: 30}, {1: "Ann"})
        ann.shift_from(1, 1)
        assert ann.timestamps == {0: 10, 2: 20, 3: 30}
        assert ann.speakers == {2: "Ann"}

    def test_deletion_drops_range_and_shifts_down(self):
        ann = AnnotationIndex({0: 10, 1: 20, 2: 30, 3: 40, 4: 50})
        ann.shift_from(1, -2)
        assert ann.timestamps == {0: 10, 1: 40, 2: 50}

    def test_apply_remap_drops_unmapped(self):
        ann = AnnotationIndex({0: 10, 1: 20, 2: 30}, {1: "Bob", 2: "Cy"})
        ann.apply_remap({0: 0, 2: 1})
        assert ann.timestamps == {0: 10, 1: 30}
        assert ann.speakers == {1: "Cy"}


class TestSetIfAbsent:
    def test_writes_once(self):
        ann = AnnotationIndex()
        assert ann.set_if_absent(0, 100) is True
        assert ann.set_if_absent(0, 200) is False
        assert ann.timestamps == {0: 100}


class TestInterpolateSplit:
    def test_midpoint_to_next_annotated(self):
        # blocks after shift: 0 (split), 1 (new trailing), 2 (was 1)
        ann = AnnotationIndex({0: 1000, 2: 5000})
        assert ann.interpolate_split(0, "tail", now=99) == 3000
        assert ann.timestamps == {0: 1000, 1: 3000, 2: 5000}

    def test_gap_when_no_later_annotation(self):
        ann = AnnotationIndex({0: 1000})
        assert ann.interpolate_split(0, "", now=99) == 4000

    def test_custom_gap(self):
        ann = AnnotationIndex({0: 1000})
        assert ann.interpolate_split(0, "x", now=99, gap_ms=500) == 1500

    def test_unstamped_original_gets_now_when_non_empty(self):
        ann = AnnotationIndex()
        assert ann.interpolate_split(0, "tail", now=7777) == 7777
        assert ann.timestamps == {1: 7777}

    def test_unstamped_original_empty_tail_stays_unstamped(self):
        ann = AnnotationIndex()
        assert ann.interpolate_split(0, "", now=7777) is None
        assert ann.timestamps == {}

    def test_speaker_carries_to_trailing(self):
        ann = AnnotationIndex({0: 1000}, {0: "Alice"})
        ann.interpolate_split(0, "x", now=0)
        assert ann.speakers == {0: "Alice", 1: "Alice"}
