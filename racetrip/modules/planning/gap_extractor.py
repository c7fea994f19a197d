"""
modules/planning/gap_extractor.py
---------------------------------
Gap Extractor — free intervals left in a day's active window once the fixed
sessions are placed.

Linear scan with a cursor starting at the window start:
  session.start > cursor  →  emit gap [cursor, session.start)
  cursor = max(cursor, session.end)
  after the last session, cursor < window.end  →  emit [cursor, window.end)

The catalog guarantees non-overlapping sessions.  If one overlaps an earlier
session anyway (or ends before it starts) ``accepted_sessions`` skips it
with a warning and it is left out of ``DayScan.sessions`` so callers never
place it.

Gaps shorter than MIN_USEFUL_GAP_MINUTES are still returned; they normally
fail the matcher's fit test and surface as free slots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from racetrip.schemas.catalog import FixedSession
from racetrip.schemas.itinerary import TimeInterval, m2t, t2m

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayScan:
    """Sessions accepted for placement plus the gaps between them."""
    sessions: tuple[FixedSession, ...]
    gaps: tuple[TimeInterval, ...]


def accepted_sessions(sessions: list[FixedSession] | tuple[FixedSession, ...]) -> tuple[FixedSession, ...]:
    """Sessions (sorted by start time) that can be placed: well-formed and not
    overlapping an earlier accepted one."""
    accepted: list[FixedSession] = []
    cursor: int | None = None
    for s in sessions:
        s_start, s_end = t2m(s.start_time), t2m(s.end_time)
        if s_end <= s_start:
            logger.warning("Skipping malformed session %r on %s: %s ends before it starts",
                           s.name, s.day_of_week, s.start_time)
            continue
        if cursor is not None and s_start < cursor:
            logger.warning("Skipping session %r on %s: overlaps %r (catalog data error)",
                           s.name, s.day_of_week, accepted[-1].name)
            continue
        accepted.append(s)
        cursor = s_end if cursor is None else max(cursor, s_end)
    return tuple(accepted)


def scan_day(window: TimeInterval, sessions: list[FixedSession] | tuple[FixedSession, ...]) -> DayScan:
    """Scan ``sessions`` (sorted by start time) across ``window``."""
    win_start, win_end = t2m(window.start), t2m(window.end)
    if win_start >= win_end:
        return DayScan(sessions=(), gaps=())

    cursor = win_start
    accepted = accepted_sessions(sessions)
    gaps: list[TimeInterval] = []

    for s in accepted:
        s_start, s_end = t2m(s.start_time), t2m(s.end_time)
        if s_start > cursor:
            gaps.append(TimeInterval(start=m2t(cursor), end=m2t(s_start)))
        cursor = max(cursor, s_end)

    if cursor < win_end:
        gaps.append(TimeInterval(start=m2t(cursor), end=m2t(win_end)))

    return DayScan(sessions=accepted, gaps=tuple(gaps))


def extract_gaps(window: TimeInterval, sessions: list[FixedSession] | tuple[FixedSession, ...]) -> list[TimeInterval]:
    """Free intervals of ``window`` not covered by ``sessions``."""
    return list(scan_day(window, sessions).gaps)
