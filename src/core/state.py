"""Dashboard view state and command handling - Pure functions.

The dashboard keeps one ViewState for the life of a session. Every user
action and every fetch outcome is expressed as a command; `update` maps
(state, command) to a new state plus the effect the shell must perform.
Nothing here touches the network or the screen.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from src.core.earthquake import EarthquakeEvent


class TimeRange(Enum):
    """USGS summary feeds selectable from the dashboard."""
    DAY = "all_day"
    WEEK = "all_week"
    MONTH = "all_month"

    @property
    def label(self) -> str:
        return _RANGE_LABELS[self]

    @classmethod
    def parse(cls, value: "str | TimeRange") -> "TimeRange":
        """Parse a range from its feed name ('all_week') or short name ('week').

        Raises:
            ValueError: If the value names no known range
        """
        if isinstance(value, TimeRange):
            return value
        text = str(value).strip().lower()
        for time_range in cls:
            if text in (time_range.value, time_range.name.lower()):
                return time_range
        raise ValueError(f"Unknown time range '{value}'. Choose from: day, week, month")


_RANGE_LABELS = {
    TimeRange.DAY: "Past day",
    TimeRange.WEEK: "Past week",
    TimeRange.MONTH: "Past month",
}


class LoadStatus(Enum):
    """Fetch cycle status: idle -> loading -> rendered | error."""
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    ERROR = "error"


class Effect(Enum):
    """Work the shell must do after a state transition."""
    NONE = "none"
    FETCH = "fetch"
    RENDER = "render"
    FOCUS = "focus"


@dataclass
class ViewState:
    """Session-wide dashboard state.

    Attributes:
        time_range: Feed currently selected
        min_magnitude: Inclusive magnitude threshold
        snapshot: Events from the last successful fetch
        status: Where the current fetch cycle stands
        last_updated: Wall-clock time of the last successful fetch
        selected_id: Event whose list row was clicked last
        highlight_until: Monotonic deadline of the row highlight
        fetch_generation: Number of fetches requested so far
    """
    time_range: TimeRange = TimeRange.DAY
    min_magnitude: float = 0.0
    snapshot: tuple[EarthquakeEvent, ...] = field(default_factory=tuple)
    status: LoadStatus = LoadStatus.IDLE
    last_updated: datetime | None = None
    selected_id: str | None = None
    highlight_until: float = 0.0
    fetch_generation: int = 0


# ===== Commands =====

@dataclass(frozen=True)
class SetMinMagnitude:
    value: float


@dataclass(frozen=True)
class SetTimeRange:
    time_range: TimeRange


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class SelectEvent:
    """A list row was clicked.

    Attributes:
        event_id: ID of the clicked event
        now: Monotonic clock reading at the time of the click
        highlight_seconds: How long the row stays highlighted
    """
    event_id: str
    now: float
    highlight_seconds: float = 0.6


@dataclass(frozen=True)
class FetchSucceeded:
    events: tuple[EarthquakeEvent, ...]
    fetched_at: datetime
    generation: int = 0


@dataclass(frozen=True)
class FetchFailed:
    message: str
    generation: int = 0


Command = (
    SetMinMagnitude | SetTimeRange | Refresh | SelectEvent
    | FetchSucceeded | FetchFailed
)


def update(state: ViewState, command: Command) -> tuple[ViewState, Effect]:
    """Apply a command to the view state.

    Pure function: the input state is never modified.

    Args:
        state: Current view state
        command: User action or fetch outcome

    Returns:
        Tuple of (new state, effect to perform)

    Raises:
        TypeError: If the command type is not recognised
    """
    if isinstance(command, SetMinMagnitude):
        # A re-render replaces the error view with the current snapshot
        status = LoadStatus.RENDERED if state.status is LoadStatus.ERROR else state.status
        return replace(state, min_magnitude=float(command.value), status=status), Effect.RENDER

    if isinstance(command, SetTimeRange):
        return _start_fetch(replace(state, time_range=command.time_range)), Effect.FETCH

    if isinstance(command, Refresh):
        return _start_fetch(state), Effect.FETCH

    if isinstance(command, SelectEvent):
        if not any(
            e.id == command.event_id and e.effective_magnitude >= state.min_magnitude
            for e in state.snapshot
        ):
            return state, Effect.NONE
        return replace(
            state,
            selected_id=command.event_id,
            highlight_until=command.now + command.highlight_seconds,
        ), Effect.FOCUS

    if isinstance(command, FetchSucceeded):
        # Snapshot is replaced wholesale; the old selection may be gone
        return replace(
            state,
            snapshot=tuple(command.events),
            status=LoadStatus.RENDERED,
            last_updated=command.fetched_at,
            selected_id=None,
            highlight_until=0.0,
        ), Effect.RENDER

    if isinstance(command, FetchFailed):
        return replace(state, status=LoadStatus.ERROR), Effect.RENDER

    raise TypeError(f"Unknown command: {command!r}")


def _start_fetch(state: ViewState) -> ViewState:
    return replace(
        state,
        status=LoadStatus.LOADING,
        fetch_generation=state.fetch_generation + 1,
    )


def is_highlighted(state: ViewState, event_id: str, now: float) -> bool:
    """Check whether a list row is still inside its highlight window."""
    return state.selected_id == event_id and now < state.highlight_until
