"""Tests for the scroll controller: stage transitions and list windowing."""

import pytest

from commitscope.aggregate import aggregate_commits
from commitscope.config import ScrollConfig
from commitscope.models import Stage
from commitscope.scales import PlotArea
from commitscope.scroll import ScrollController, days_to_show, window_slice
from commitscope.state import FilterState

STAGES = ScrollConfig().stages


class TestDaysToShow:
    @pytest.mark.parametrize("stage,expected", [
        (Stage.INTRO, 2),     # ceil(10 * 0.15)
        (Stage.EARLY, 4),     # ceil(10 * 0.35)
        (Stage.MID, 6),
        (Stage.LATE, 9),      # ceil(8.5)
        (Stage.COMPLETE, 10),
    ])
    def test_fractions(self, stage, expected):
        assert days_to_show(stage, 10, STAGES) == expected

    def test_minimums_apply_to_short_histories(self):
        assert days_to_show(Stage.LATE, 4, STAGES) == 4
        assert days_to_show(Stage.MID, 5, STAGES) == 3

    def test_never_more_than_total(self):
        assert days_to_show(Stage.LATE, 2, STAGES) == 2
        assert days_to_show(Stage.INTRO, 0, STAGES) == 0


class TestWindowSlice:
    def test_top(self):
        assert window_slice(0, 150, 10, 40) == (0, 10)

    def test_floors_offset(self):
        assert window_slice(449, 150, 10, 40) == (2, 12)

    def test_clamped_at_end(self):
        assert window_slice(100_000, 150, 10, 40) == (30, 40)

    def test_negative_offset(self):
        assert window_slice(-300, 150, 10, 40) == (0, 10)

    def test_fewer_items_than_window(self):
        assert window_slice(500, 150, 10, 4) == (0, 4)

    def test_bad_item_height(self):
        with pytest.raises(ValueError):
            window_slice(0, 0, 10, 4)


class TestScrollController:
    @pytest.fixture()
    def controller(self, ten_day_lines):
        commits = aggregate_commits(ten_day_lines)
        state = FilterState(commits, PlotArea(top=40, right=1060, bottom=640, left=70))
        return ScrollController(state, ScrollConfig())

    def test_initial_stage_is_intro(self, controller):
        assert controller.stage == Stage.INTRO
        assert controller.state.snapshot().scroll_step_index == 0

    def test_forward_transitions(self, controller):
        shown = []
        for stage in ("early", "mid"):
            assert controller.enter(stage) is True
            shown.append(controller.days_to_show(10))
        assert controller.stage == Stage.MID
        assert shown == [4, 6]

    def test_scrolling_back_lowers_days(self, controller):
        controller.enter("early")
        controller.enter("mid")
        assert controller.days_to_show(10) == 6
        controller.enter("early")
        assert controller.days_to_show(10) == 4
        assert controller.state.snapshot().scroll_step_index == Stage.EARLY.position

    def test_reentering_active_stage_is_noop(self, controller):
        calls = []
        controller.state.subscribe(calls.append)
        assert controller.enter("early") is True
        assert controller.enter("early") is False
        assert controller.enter(Stage.EARLY) is False
        assert len(calls) == 1

    def test_unknown_stage(self, controller):
        with pytest.raises(ValueError):
            controller.enter("epilogue")

    def test_scroll_to_records_offset(self, controller):
        assert controller.scroll_to(300, 10) == (0, 10)
        assert controller.offset == 300

    def test_spacer_height(self, controller):
        assert controller.spacer_height(10) == 9 * 150
