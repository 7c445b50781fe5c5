"""Tests for view state transitions - Pure functions."""

from datetime import datetime, timezone

import pytest

from src.core.earthquake import EarthquakeEvent
from src.core.state import (
    Effect,
    FetchFailed,
    FetchSucceeded,
    LoadStatus,
    Refresh,
    SelectEvent,
    SetMinMagnitude,
    SetTimeRange,
    TimeRange,
    ViewState,
    is_highlighted,
    update,
)


FETCHED_AT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_event(event_id, magnitude):
    return EarthquakeEvent(
        id=event_id,
        magnitude=magnitude,
        place="Somewhere",
        time_ms=0,
        longitude=1.0,
        latitude=2.0,
    )


@pytest.fixture
def loaded_state():
    return ViewState(
        min_magnitude=2.5,
        snapshot=(make_event("a", 5.0), make_event("b", 1.0)),
        status=LoadStatus.RENDERED,
        fetch_generation=1,
    )


class TestTimeRange:
    """Tests for TimeRange parsing and labels."""

    def test_feed_names(self):
        assert TimeRange.DAY.value == "all_day"
        assert TimeRange.WEEK.value == "all_week"
        assert TimeRange.MONTH.value == "all_month"

    @pytest.mark.parametrize("text,expected", [
        ("day", TimeRange.DAY),
        ("WEEK", TimeRange.WEEK),
        ("all_month", TimeRange.MONTH),
        (" all_day ", TimeRange.DAY),
    ])
    def test_parse(self, text, expected):
        assert TimeRange.parse(text) is expected

    def test_parse_passes_enum_through(self):
        assert TimeRange.parse(TimeRange.WEEK) is TimeRange.WEEK

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            TimeRange.parse("hour")

    def test_labels(self):
        assert TimeRange.DAY.label == "Past day"
        assert TimeRange.MONTH.label == "Past month"


class TestDefaults:
    """Tests for the initial ViewState."""

    def test_starts_empty_and_idle(self):
        state = ViewState()

        assert state.time_range is TimeRange.DAY
        assert state.snapshot == ()
        assert state.status is LoadStatus.IDLE
        assert state.last_updated is None


class TestSetMinMagnitude:
    """Threshold changes re-render without fetching."""

    def test_updates_threshold_and_renders(self, loaded_state):
        state, effect = update(loaded_state, SetMinMagnitude(4.0))

        assert state.min_magnitude == 4.0
        assert effect is Effect.RENDER
        assert state.snapshot == loaded_state.snapshot

    def test_does_not_mutate_input(self, loaded_state):
        update(loaded_state, SetMinMagnitude(4.0))

        assert loaded_state.min_magnitude == 2.5

    def test_clears_error_view(self, loaded_state):
        errored, _ = update(loaded_state, FetchFailed("boom"))

        state, _ = update(errored, SetMinMagnitude(1.0))

        assert state.status is LoadStatus.RENDERED

    def test_keeps_loading_status(self, loaded_state):
        loading, _ = update(loaded_state, Refresh())

        state, _ = update(loading, SetMinMagnitude(1.0))

        assert state.status is LoadStatus.LOADING


class TestFetchCommands:
    """Time range and refresh trigger fetches."""

    def test_set_time_range_fetches(self, loaded_state):
        state, effect = update(loaded_state, SetTimeRange(TimeRange.WEEK))

        assert state.time_range is TimeRange.WEEK
        assert state.status is LoadStatus.LOADING
        assert state.fetch_generation == 2
        assert effect is Effect.FETCH

    def test_refresh_keeps_other_state(self, loaded_state):
        state, effect = update(loaded_state, Refresh())

        assert effect is Effect.FETCH
        assert state.time_range is loaded_state.time_range
        assert state.min_magnitude == loaded_state.min_magnitude
        assert state.snapshot == loaded_state.snapshot

    def test_success_replaces_snapshot(self, loaded_state):
        new_events = (make_event("z", 3.3),)

        state, effect = update(loaded_state, FetchSucceeded(new_events, FETCHED_AT))

        assert state.snapshot == new_events
        assert state.status is LoadStatus.RENDERED
        assert state.last_updated == FETCHED_AT
        assert effect is Effect.RENDER

    def test_success_clears_selection(self, loaded_state):
        selected, _ = update(loaded_state, SelectEvent("a", now=10.0))

        state, _ = update(selected, FetchSucceeded((), FETCHED_AT))

        assert state.selected_id is None

    def test_failure_keeps_snapshot(self, loaded_state):
        state, effect = update(loaded_state, FetchFailed("Network response not ok"))

        assert state.snapshot == loaded_state.snapshot
        assert state.status is LoadStatus.ERROR
        assert effect is Effect.RENDER


class TestSelectEvent:
    """List row clicks."""

    def test_selects_visible_event(self, loaded_state):
        state, effect = update(loaded_state, SelectEvent("a", now=100.0, highlight_seconds=0.6))

        assert effect is Effect.FOCUS
        assert state.selected_id == "a"
        assert state.highlight_until == pytest.approx(100.6)

    def test_ignores_unknown_event(self, loaded_state):
        state, effect = update(loaded_state, SelectEvent("nope", now=1.0))

        assert effect is Effect.NONE
        assert state is loaded_state

    def test_ignores_filtered_out_event(self, loaded_state):
        state, effect = update(loaded_state, SelectEvent("b", now=1.0))

        assert effect is Effect.NONE
        assert state.selected_id is None

    def test_highlight_clears_after_delay(self, loaded_state):
        state, _ = update(loaded_state, SelectEvent("a", now=100.0, highlight_seconds=0.6))

        assert is_highlighted(state, "a", now=100.3)
        assert not is_highlighted(state, "a", now=100.7)
        assert not is_highlighted(state, "b", now=100.3)


class TestUnknownCommand:
    def test_raises_type_error(self, loaded_state):
        with pytest.raises(TypeError):
            update(loaded_state, "refresh")
