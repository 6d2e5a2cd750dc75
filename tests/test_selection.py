"""Tests for block selection."""

from livenotes.selection import SelectionModel


class TestSelectionModel:
    def test_plain_click(self):
        sel = SelectionModel()
        sel.click(3)
        sel.click(1)
        assert sel.indices == [1]
        assert sel.anchor == 1

    def test_shift_click_range_keeps_anchor(self):
        sel = SelectionModel()
        sel.click(4)
        sel.click(1, extend=True)
        assert sel.indices == [1, 2, 3, 4]
        assert sel.anchor == 4
        sel.click(6, extend=True)
        assert sel.indices == [4, 5, 6]

    def test_toggle(self):
        sel = SelectionModel()
        sel.click(1)
        sel.click(3, toggle=True)
        assert sel.indices == [1, 3]
        assert sel.anchor == 3
        sel.click(1, toggle=True)
        assert sel.indices == [3]

    def test_drag_accumulates_until_mouse_up(self):
        sel = SelectionModel()
        assert sel.begin_drag(2)
        sel.drag_over(3)
        sel.drag_over(5)
        sel.end_drag()
        sel.drag_over(7)
        assert sel.indices == [2, 3, 5]

    def test_drag_from_text_field_ignored(self):
        sel = SelectionModel()
        assert sel.begin_drag(2, in_text_field=True) is False
        sel.drag_over(3)
        assert sel.indices == []

    def test_joined_text_sorted(self):
        sel = SelectionModel()
        sel.click(2)
        sel.click(0, toggle=True)
        assert sel.joined_text(["a", "b", "c"]) == "a\nc"

    def test_prune(self):
        sel = SelectionModel()
        sel.click(1)
        sel.click(5, toggle=True)
        sel.prune(3)
        assert sel.indices == [1]
        assert sel.anchor is None
