"""Tests for the insertion planner."""

from livenotes.planner import plan_insertion


class TestPlanInsertion:
    def test_after_last_earlier_entry(self):
        assert plan_insertion({0: 1000, 2: 5000}, 3, 3000) == 1

    def test_earlier_than_all_goes_first(self):
        assert plan_insertion({0: 1000, 2: 5000}, 3, 500) == 0

    def test_later_than_all_goes_last(self):
        assert plan_insertion({0: 1000, 2: 5000}, 3, 9000) == 3

    def test_later_than_all_goes_last_even_when_last_block_is_unstamped(self):
        assert plan_insertion({0: 1000}, 3, 9000) == 3

    def test_later_than_all_with_out_of_order_stamps(self):
        # the latest stamp sits on block 0
        assert plan_insertion({0: 9000, 1: 2000}, 4, 9500) == 4

    def test_no_annotations_goes_last(self):
        assert plan_insertion({}, 4, 1234) == 4

    def test_equal_timestamp_is_not_earlier(self):
        assert plan_insertion({0: 1000, 1: 2000}, 2, 2000) == 1

    def test_out_of_order_timestamps_use_time_order(self):
        # block 0 stamped later than block 2
        assert plan_insertion({0: 9000, 2: 1000}, 3, 5000) == 3

    def test_always_in_bounds(self):
        stamps = {0: 10, 1: 20, 4: 5, 5: 40}
        for t in range(0, 60, 3):
            assert 0 <= plan_insertion(stamps, 6, t) <= 6
