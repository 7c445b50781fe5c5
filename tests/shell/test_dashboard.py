"""Tests for the Dashboard module.

Tests the coordination between functional core and imperative shell.
Uses mocks for the feed client; the map is rendered with real folium.
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import responses

from src.core.config import DashboardConfig
from src.core.earthquake import EarthquakeEvent
from src.core.render import EMPTY_MESSAGE, FAILED_MESSAGE
from src.core.state import Effect, LoadStatus, SelectEvent, SetMinMagnitude, TimeRange
from src.dashboard import Dashboard
from src.shell.feed_client import FeedClient, FetchError


FETCHED_AT = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


def make_event(event_id, magnitude, lat=0.0, lon=0.0):
    return EarthquakeEvent(
        id=event_id,
        magnitude=magnitude,
        place=f"Place {event_id}",
        time_ms=1703001600000,
        longitude=lon,
        latitude=lat,
        depth_km=8.0,
        url="",
    )


@pytest.fixture
def snapshot():
    return [
        make_event("a", 5.2, lat=10.0, lon=20.0),
        make_event("b", 3.1, lat=-10.0, lon=40.0),
        make_event("c", 6.8, lat=30.0, lon=-20.0),
    ]


@pytest.fixture
def feed_client(snapshot):
    client = Mock(spec=FeedClient)
    client.fetch_snapshot.return_value = snapshot
    return client


@pytest.fixture
def clock():
    clock = Mock(return_value=100.0)
    return clock


@pytest.fixture
def dashboard(feed_client, clock):
    return Dashboard(
        config=DashboardConfig(default_min_magnitude=0.0),
        feed_client=feed_client,
        clock=clock,
        wall_clock=lambda: FETCHED_AT,
    )


class TestInitialState:
    """Tests for a freshly created dashboard."""

    def test_uses_config_defaults(self, feed_client):
        config = DashboardConfig(default_time_range=TimeRange.WEEK, default_min_magnitude=3.0)

        dashboard = Dashboard(config=config, feed_client=feed_client)

        assert dashboard.state.time_range is TimeRange.WEEK
        assert dashboard.state.min_magnitude == 3.0
        assert dashboard.state.snapshot == ()
        assert dashboard.magnitude_label == "3.0"
        feed_client.fetch_snapshot.assert_not_called()

    def test_creates_feed_client_from_config(self):
        config = DashboardConfig(feed_base_url="https://example.com/feeds", request_timeout_seconds=7)

        dashboard = Dashboard(config=config)

        assert dashboard.feed_client.base_url == "https://example.com/feeds"
        assert dashboard.feed_client.timeout == 7


class TestFetchCycle:
    """Tests for start(), refresh() and set_time_range()."""

    def test_start_fetches_default_range(self, dashboard, feed_client, snapshot):
        dashboard.start()

        feed_client.fetch_snapshot.assert_called_once_with(TimeRange.DAY)
        assert dashboard.state.snapshot == tuple(snapshot)
        assert dashboard.state.status is LoadStatus.RENDERED
        assert dashboard.last_updated_text == "Last: 07:08:09"

    def test_render_is_sorted_by_magnitude(self, dashboard):
        dashboard.start()

        assert [e.magnitude for e in dashboard.visible] == [6.8, 5.2, 3.1]
        assert [r.event_id for r in dashboard.rows] == ["c", "a", "b"]
        assert dashboard.status_text == "3 events • Min mag 0.0"
        assert dashboard.list_message is None

    def test_set_time_range_refetches(self, dashboard, feed_client):
        dashboard.start()

        dashboard.set_time_range(TimeRange.MONTH)

        assert dashboard.state.time_range is TimeRange.MONTH
        feed_client.fetch_snapshot.assert_called_with(TimeRange.MONTH)
        assert feed_client.fetch_snapshot.call_count == 2

    def test_refresh_keeps_range_and_threshold(self, dashboard, feed_client):
        dashboard.start()
        dashboard.set_min_magnitude(4.0)

        dashboard.refresh()

        feed_client.fetch_snapshot.assert_called_with(TimeRange.DAY)
        assert dashboard.state.min_magnitude == 4.0
        assert [e.magnitude for e in dashboard.visible] == [6.8, 5.2]

    def test_new_snapshot_replaces_old(self, dashboard, feed_client):
        dashboard.start()
        feed_client.fetch_snapshot.return_value = [make_event("z", 2.0)]

        dashboard.refresh()

        assert [e.id for e in dashboard.state.snapshot] == ["z"]


class TestFetchFailure:
    """A failed fetch shows the error and keeps the previous snapshot."""

    def test_failure_keeps_snapshot(self, dashboard, feed_client, snapshot):
        dashboard.start()
        feed_client.fetch_snapshot.side_effect = FetchError("HTTP 503")

        dashboard.refresh()

        assert dashboard.state.snapshot == tuple(snapshot)
        assert dashboard.state.status is LoadStatus.ERROR
        assert dashboard.status_text == "Error"
        assert dashboard.list_message == FAILED_MESSAGE
        assert dashboard.rows == ()
        assert dashboard.last_error == "HTTP 503"

    def test_failure_on_first_load(self, dashboard, feed_client):
        feed_client.fetch_snapshot.side_effect = FetchError("offline")

        dashboard.start()

        assert dashboard.state.snapshot == ()
        assert dashboard.list_message == "Failed to load data. Try refresh."

    @responses.activate
    def test_wrongly_shaped_feed_shows_error_view(self, clock):
        responses.add(
            responses.GET,
            FeedClient().endpoint_for(TimeRange.DAY),
            json={"features": [{"id": "x", "properties": ["oops"], "geometry": {"coordinates": [1, 2]}}]},
            status=200,
        )
        dashboard = Dashboard(feed_client=FeedClient(), clock=clock)

        dashboard.start()

        assert dashboard.state.status is LoadStatus.ERROR
        assert dashboard.list_message == FAILED_MESSAGE
        assert "Unexpected feed payload" in dashboard.last_error

    def test_recovers_on_next_refresh(self, dashboard, feed_client, snapshot):
        feed_client.fetch_snapshot.side_effect = [FetchError("offline"), snapshot]

        dashboard.start()
        dashboard.refresh()

        assert dashboard.state.status is LoadStatus.RENDERED
        assert dashboard.last_error is None
        assert len(dashboard.rows) == 3


class TestDisplayTimezone:
    """Event times follow the configured display timezone."""

    def test_rows_use_configured_zone(self, feed_client, clock):
        config = DashboardConfig(default_min_magnitude=0.0, display_timezone="Asia/Tokyo")
        dashboard = Dashboard(config=config, feed_client=feed_client, clock=clock)

        dashboard.start()

        assert dashboard.rows[0].time_label == "01:00:00"


class TestMagnitudeThreshold:
    """Threshold changes re-render without a network call."""

    def test_filters_without_fetching(self, dashboard, feed_client):
        dashboard.start()

        dashboard.set_min_magnitude(4.0)

        assert feed_client.fetch_snapshot.call_count == 1
        assert [e.magnitude for e in dashboard.visible] == [6.8, 5.2]
        assert dashboard.status_text == "2 events • Min mag 4.0"
        assert dashboard.magnitude_label == "4.0"

    def test_empty_result_is_not_an_error(self, dashboard):
        dashboard.start()

        dashboard.set_min_magnitude(9.0)

        assert dashboard.visible == []
        assert dashboard.list_message == EMPTY_MESSAGE
        assert dashboard.plan.bounds is None

    def test_empty_result_skips_viewport_fit(self, dashboard):
        dashboard.start()
        dashboard.set_min_magnitude(9.0)

        dashboard.render_map()

        assert dashboard.coordinator.fitted_bounds is None
        assert dashboard.coordinator.markers == {}


class TestSelectEvent:
    """Row clicks focus the map on one event."""

    def test_click_recentres_and_opens_one_popup(self, dashboard):
        dashboard.start()

        dashboard.select_event("b")
        fmap = dashboard.render_map()

        assert fmap.location == [-10.0, 40.0]
        assert dashboard.coordinator.open_popups == ["b"]
        assert dashboard.focus.zoom == 6

    def test_highlight_is_transient(self, dashboard, clock):
        dashboard.start()

        dashboard.select_event("a")

        assert dashboard.is_highlighted("a")
        assert not dashboard.is_highlighted("c")
        clock.return_value = 100.7
        assert not dashboard.is_highlighted("a")

    def test_threshold_change_clears_focus(self, dashboard):
        dashboard.start()
        dashboard.select_event("a")

        dashboard.set_min_magnitude(1.0)
        dashboard.render_map()

        assert dashboard.focus is None
        assert dashboard.coordinator.fitted_bounds == dashboard.plan.bounds

    def test_click_on_filtered_event_is_ignored(self, dashboard):
        dashboard.start()
        dashboard.set_min_magnitude(6.0)

        dashboard.select_event("b")

        assert dashboard.focus is None
        assert dashboard.state.selected_id is None


class TestDispatch:
    """Tests for Dashboard.dispatch()."""

    def test_returns_effect(self, dashboard):
        dashboard.start()

        assert dashboard.dispatch(SetMinMagnitude(2.0)) is Effect.RENDER
        assert dashboard.dispatch(SelectEvent("zzz", now=0.0)) is Effect.NONE
