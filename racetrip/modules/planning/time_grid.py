"""
modules/planning/time_grid.py
-----------------------------
Time Grid Builder — expands an arrival/departure window into calendar days.

Each GridDay carries:
  - the calendar date (derived from the race date, Sunday = offset 0)
  - the weekday label
  - that weekday's fixed sessions, sorted by start time
  - the day's active window

Active window:
  arrival day    ARRIVAL_TIME   → DAY_END
  departure day  DAY_START      → DEPARTURE_TIME
  same day       ARRIVAL_TIME   → DEPARTURE_TIME
  otherwise      DAY_START      → DAY_END

Only the sessions the traveler chose to attend are placed (all of them by
default).  Sessions entirely outside the window are dropped (the traveler is
not there), as are malformed or overlapping ones.  A session straddling a
window edge is kept verbatim and the window is widened to cover it, so the
day's slots can still tile the window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from racetrip import config
from racetrip.errors import InvalidRangeError
from racetrip.modules.planning.gap_extractor import accepted_sessions
from racetrip.schemas.catalog import EVENT_DAY_OFFSETS, EVENT_DAY_ORDER, FixedSession
from racetrip.schemas.itinerary import TimeInterval, m2t, parse_hhmm, t2m

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridDay:
    date: date
    weekday: str
    window: TimeInterval
    sessions: tuple[FixedSession, ...] = field(default_factory=tuple)


def day_span(arrival_day: str, departure_day: str) -> list[str]:
    """
    Weekday labels from arrival through departure inclusive.

    Raises InvalidRangeError for unknown labels or a reversed range.
    """
    for label in (arrival_day, departure_day):
        if label not in EVENT_DAY_ORDER:
            raise InvalidRangeError(
                f"Unknown day {label!r}; expected one of {', '.join(EVENT_DAY_ORDER)}"
            )
    start = EVENT_DAY_ORDER.index(arrival_day)
    end = EVENT_DAY_ORDER.index(departure_day)
    if start > end:
        raise InvalidRangeError(
            f"Arrival day ({arrival_day}) is after departure day ({departure_day})"
        )
    return list(EVENT_DAY_ORDER[start:end + 1])


def event_dates(race_date: date) -> dict[str, date]:
    """Calendar date for every weekday label around a Sunday race."""
    return {day: race_date + timedelta(days=offset) for day, offset in EVENT_DAY_OFFSETS.items()}


def _base_window(is_first: bool, is_last: bool) -> TimeInterval:
    start = parse_hhmm(config.ARRIVAL_TIME if is_first else config.DAY_START)
    end = parse_hhmm(config.DEPARTURE_TIME if is_last else config.DAY_END)
    return TimeInterval(start=start, end=end)


def _fit_window(
    window: TimeInterval,
    sessions: list[FixedSession],
) -> tuple[TimeInterval, tuple[FixedSession, ...]]:
    """
    Drop sessions outside ``window`` and sessions that cannot be placed
    (malformed or overlapping); widen the window around straddling ones.
    """
    start, end = t2m(window.start), t2m(window.end)
    in_window: list[FixedSession] = []
    for s in sessions:
        s_start, s_end = t2m(s.start_time), t2m(s.end_time)
        if s_end <= start or s_start >= end:
            logger.debug("Session %r (%s %s) outside active window %s, dropped",
                         s.name, s.day_of_week, s.start_time, window)
            continue
        in_window.append(s)
    kept = accepted_sessions(in_window)
    if kept:
        start = min(start, min(t2m(s.start_time) for s in kept))
        end = max(end, max(t2m(s.end_time) for s in kept))
    return TimeInterval(start=m2t(start), end=m2t(end)), kept


def build_time_grid(
    arrival_day: str,
    departure_day: str,
    race_date: date,
    sessions: list[FixedSession],
    session_ids: frozenset[int] | None = None,
) -> list[GridDay]:
    """
    Build one GridDay per day from arrival through departure inclusive.

    Args:
        arrival_day:   Weekday label from EVENT_DAY_ORDER.
        departure_day: Weekday label from EVENT_DAY_ORDER.
        race_date:     The Sunday of the race weekend.
        sessions:      Every FixedSession of the event (any order).
        session_ids:   Sessions the traveler attends; None means all of them.

    Returns:
        Ordered GridDay list; days without sessions carry an empty tuple.
    """
    labels = day_span(arrival_day, departure_day)
    dates = event_dates(race_date)

    by_day: dict[str, list[FixedSession]] = {label: [] for label in labels}
    for s in sessions:
        if session_ids is not None and s.session_id not in session_ids:
            continue
        if s.day_of_week in by_day:
            by_day[s.day_of_week].append(s)

    grid: list[GridDay] = []
    for idx, label in enumerate(labels):
        day_sessions = sorted(by_day[label], key=lambda s: (t2m(s.start_time), t2m(s.end_time)))
        base = _base_window(is_first=idx == 0, is_last=idx == len(labels) - 1)
        window, kept = _fit_window(base, day_sessions)
        grid.append(GridDay(date=dates[label], weekday=label, window=window, sessions=kept))
    return grid
