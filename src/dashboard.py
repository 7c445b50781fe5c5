"""Dashboard - Wires Functional Core and Imperative Shell.

This module owns the session's ViewState and coordinates the flow of
data between the pure core (state transitions, filtering, render plans)
and the shell (feed client, map renderer). The UI layer only calls the
named operations below and reads the derived view properties.
"""

import logging
import time
from datetime import datetime
from typing import Callable

import folium
import pytz

from src.core.config import DashboardConfig
from src.core.earthquake import EarthquakeEvent
from src.core.render import (
    ERROR_STATS,
    FAILED_MESSAGE,
    LOADING_MESSAGE,
    LOADING_STATS,
    Focus,
    ListRow,
    RenderPlan,
    build_render_plan,
    focus_for,
)
from src.core.state import (
    Command,
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
from src.core.view import visible_view
from src.shell.feed_client import FeedClient, FetchError
from src.shell.map_renderer import RenderCoordinator


logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class Dashboard:
    """Coordinates fetching, filtering and rendering for one session.

    This class wires together:
    - Feed client (fetches snapshots)
    - Core functions (state transitions, filtering, render plans)
    - Render coordinator (draws the folium map)
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        feed_client: FeedClient | None = None,
        coordinator: RenderCoordinator | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = _local_now,
    ) -> None:
        """Initialize dashboard with configuration.

        Args:
            config: Dashboard configuration
            feed_client: Feed client (created if not provided)
            coordinator: Map render coordinator (created if not provided)
            clock: Monotonic clock used for row highlights
            wall_clock: Clock used for the "last updated" label
        """
        self.config = config or DashboardConfig()
        self.feed_client = feed_client or FeedClient(
            base_url=self.config.feed_base_url,
            timeout=self.config.request_timeout_seconds,
        )
        self.coordinator = coordinator or RenderCoordinator(self.config)
        self._clock = clock
        self._wall_clock = wall_clock
        self.display_tz = (
            pytz.timezone(self.config.display_timezone)
            if self.config.display_timezone else None
        )

        self.state = ViewState(
            time_range=self.config.default_time_range,
            min_magnitude=self.config.default_min_magnitude,
        )
        self.visible: list[EarthquakeEvent] = []
        self.plan: RenderPlan = build_render_plan(
            [], self.state.min_magnitude, self.config.bounds_padding, self.display_tz,
        )
        self.focus: Focus | None = None
        self.last_error: str | None = None

    # ===== Named operations =====

    def start(self) -> None:
        """Initial load for the default time range."""
        self.dispatch(Refresh())

    def set_min_magnitude(self, value: float) -> None:
        self.dispatch(SetMinMagnitude(value))

    def set_time_range(self, time_range: TimeRange) -> None:
        self.dispatch(SetTimeRange(time_range))

    def refresh(self) -> None:
        self.dispatch(Refresh())

    def select_event(self, event_id: str) -> None:
        """Handle a list row click: focus the map on the event."""
        self.dispatch(SelectEvent(
            event_id=event_id,
            now=self._clock(),
            highlight_seconds=self.config.highlight_seconds,
        ))

    def dispatch(self, command: Command) -> Effect:
        """Apply a command to the state and perform the resulting effect.

        Args:
            command: User action or fetch outcome

        Returns:
            The effect that was performed
        """
        if isinstance(command, (FetchSucceeded, FetchFailed)):
            if command.generation < self.state.fetch_generation:
                logger.warning(
                    "Applying result of fetch #%d after fetch #%d was requested",
                    command.generation,
                    self.state.fetch_generation,
                )

        self.state, effect = update(self.state, command)

        if effect is Effect.FETCH:
            self._fetch()
        elif effect is Effect.RENDER:
            self._rerender()
        elif effect is Effect.FOCUS:
            self._refocus()

        return effect

    # ===== Effects =====

    def _fetch(self) -> None:
        """Fetch a snapshot for the current range and feed the outcome back."""
        time_range = self.state.time_range
        generation = self.state.fetch_generation

        try:
            events = self.feed_client.fetch_snapshot(time_range)
        except FetchError as e:
            logger.error("Fetch error for %s: %s", time_range.value, e)
            self.last_error = str(e)
            self.dispatch(FetchFailed(message=str(e), generation=generation))
            return

        self.last_error = None
        self.dispatch(FetchSucceeded(
            events=tuple(events),
            fetched_at=self._wall_clock(),
            generation=generation,
        ))

    def _rerender(self) -> None:
        self.visible = visible_view(self.state.snapshot, self.state.min_magnitude)
        self.plan = build_render_plan(
            self.visible,
            self.state.min_magnitude,
            self.config.bounds_padding,
            self.display_tz,
        )
        # A full re-render fits the viewport again
        self.focus = None

    def _refocus(self) -> None:
        event = next((e for e in self.visible if e.id == self.state.selected_id), None)
        self.focus = focus_for(event) if event is not None else None

    # ===== Derived view =====

    @property
    def status_text(self) -> str:
        """Stats line: counts, 'Loading…' or 'Error'."""
        if self.state.status is LoadStatus.LOADING:
            return LOADING_STATS
        if self.state.status is LoadStatus.ERROR:
            return ERROR_STATS
        return self.plan.stats

    @property
    def list_message(self) -> str | None:
        """Placeholder shown instead of list rows, None when rows are shown."""
        if self.state.status is LoadStatus.LOADING:
            return LOADING_MESSAGE
        if self.state.status is LoadStatus.ERROR:
            return FAILED_MESSAGE
        return self.plan.message

    @property
    def rows(self) -> tuple[ListRow, ...]:
        if self.state.status in (LoadStatus.LOADING, LoadStatus.ERROR):
            return ()
        return self.plan.rows

    @property
    def last_updated_text(self) -> str:
        if self.state.last_updated is None:
            return ""
        return "Last: " + self.state.last_updated.strftime("%H:%M:%S")

    @property
    def magnitude_label(self) -> str:
        return f"{self.state.min_magnitude:.1f}"

    def is_highlighted(self, event_id: str, now: float | None = None) -> bool:
        """Whether a row is inside its transient highlight window."""
        return is_highlighted(self.state, event_id, self._clock() if now is None else now)

    def render_map(self) -> folium.Map:
        """Draw the current plan, centred on the focused event if any."""
        return self.coordinator.render(self.plan, self.focus)
