"""
db/repositories/catalog_repo.py
-------------------------------
Read-only queries against the race catalog tables `races`, `sessions` and
`experiences`.

All functions accept a psycopg2 connection object; the caller manages it
via db.connection.get_conn().  Times are stored as 'HH:MM' strings and
durations as numeric hours.
"""

from __future__ import annotations

from datetime import date, time
from typing import Any

from racetrip.schemas.catalog import EVENT_DAY_ORDER, Experience, FixedSession, RaceEvent
from racetrip.schemas.itinerary import parse_hhmm


def _rows(cur) -> list[dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


def _as_time(value: Any) -> time:
    return value if isinstance(value, time) else parse_hhmm(str(value)[:5])


def _as_date(value: Any) -> date | None:
    if value is None:
        return None
    if hasattr(value, "date") and callable(value.date):
        return value.date()
    return value if isinstance(value, date) else date.fromisoformat(str(value)[:10])


# ── races ──────────────────────────────────────────────────────────────────────

def get_race_by_slug(conn, slug: str) -> RaceEvent | None:
    """Return one race by slug, or None if not found."""
    sql = """
        SELECT id, slug, name, city, country, timezone, race_date
        FROM races
        WHERE slug = %s
        LIMIT 1
    """
    with conn.cursor() as cur:
        cur.execute(sql, (slug,))
        rows = _rows(cur)
    if not rows:
        return None
    r = rows[0]
    return RaceEvent(
        event_id=int(r["id"]),
        slug=r["slug"] or "",
        name=r["name"] or "",
        city=r["city"] or "",
        country=r["country"] or "",
        timezone=r["timezone"] or "",
        race_date=_as_date(r["race_date"]),
    )


# ── sessions ───────────────────────────────────────────────────────────────────

def get_sessions_for_race(conn, race_id: int) -> list[FixedSession]:
    """All sessions of a race ordered by weekend day, then start time."""
    sql = """
        SELECT id, name, short_name, day_of_week, start_time, end_time,
               session_type, series
        FROM sessions
        WHERE race_id = %s
        ORDER BY start_time ASC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (race_id,))
        rows = _rows(cur)

    sessions = [
        FixedSession(
            session_id=int(r["id"]),
            name=r["name"] or "",
            short_name=r.get("short_name") or "",
            day_of_week=r["day_of_week"],
            start_time=_as_time(r["start_time"]),
            end_time=_as_time(r["end_time"]),
            session_type=r.get("session_type") or "event",
            series=r.get("series") or "Formula 1",
        )
        for r in rows
    ]
    day_rank = {day: idx for idx, day in enumerate(EVENT_DAY_ORDER)}
    sessions.sort(key=lambda s: (day_rank.get(s.day_of_week, len(day_rank)), s.start_time))
    return sessions


# ── experiences ────────────────────────────────────────────────────────────────

def get_experiences_for_race(conn, race_id: int) -> list[Experience]:
    """All experiences offered for a race, in catalog order."""
    sql = """
        SELECT id, title, slug, short_description, category, duration_hours,
               rating, is_featured, price_label, affiliate_url
        FROM experiences
        WHERE race_id = %s
        ORDER BY sort_order ASC, id ASC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (race_id,))
        rows = _rows(cur)

    return [
        Experience(
            experience_id=int(r["id"]),
            title=r["title"] or "",
            category=r["category"],
            duration_hours=float(r["duration_hours"] or 0),
            rating=float(r["rating"] or 0),
            is_featured=bool(r["is_featured"]),
            slug=r.get("slug") or "",
            short_description=r.get("short_description") or "",
            price_label=r.get("price_label") or "",
            affiliate_url=r.get("affiliate_url") or "",
        )
        for r in rows
    ]
