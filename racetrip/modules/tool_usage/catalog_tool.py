"""
modules/tool_usage/catalog_tool.py
----------------------------------
Event catalog access — race, fixed sessions and experiences.

Backends (CATALOG_BACKEND):
  "stub"      StubEventCatalog, hardcoded Melbourne 2026 weekend for offline
              development and tests.  No database needed.
  "postgres"  PostgresEventCatalog, read-only queries through
              db.repositories.catalog_repo.

Contract (both backends):
  get_event(slug)                 -> RaceEvent | None
  get_sessions_for_event(id)      -> list[FixedSession]   (day, then start time)
  get_experiences_for_event(id)   -> list[Experience]
Any backend failure raises CatalogUnavailableError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, time
from typing import Optional

import psycopg2

from racetrip import config
from racetrip.db.connection import get_conn
from racetrip.db.repositories import catalog_repo
from racetrip.errors import CatalogUnavailableError
from racetrip.schemas.catalog import EVENT_DAY_ORDER, Experience, FixedSession, RaceEvent

logger = logging.getLogger(__name__)


class EventCatalog(ABC):
    """Read-only view of the event catalog."""

    @abstractmethod
    def get_event(self, slug: str) -> Optional[RaceEvent]:
        ...

    @abstractmethod
    def get_sessions_for_event(self, event_id: int) -> list[FixedSession]:
        ...

    @abstractmethod
    def get_experiences_for_event(self, event_id: int) -> list[Experience]:
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Stub catalog
# ─────────────────────────────────────────────────────────────────────────────

_MELBOURNE = RaceEvent(
    event_id=1,
    slug="melbourne-2026",
    name="Australian Grand Prix",
    city="Melbourne",
    country="Australia",
    timezone="Australia/Melbourne",
    race_date=date(2026, 3, 8),
)

# Thursday is a media day with no F1 running.
_MELBOURNE_SESSIONS: list[FixedSession] = [
    FixedSession(1, "Free Practice 1", "Friday",   time(12, 30), time(13, 30), "practice",   "FP1"),
    FixedSession(2, "Free Practice 2", "Friday",   time(16, 0),  time(17, 0),  "practice",   "FP2"),
    FixedSession(3, "Free Practice 3", "Saturday", time(12, 30), time(13, 30), "practice",   "FP3"),
    FixedSession(4, "Qualifying",      "Saturday", time(16, 0),  time(17, 0),  "qualifying", "Q"),
    FixedSession(5, "Grand Prix",      "Sunday",   time(15, 0),  time(17, 0),  "race",       "Race"),
]


def _exp(eid: int, title: str, category: str, hours: float, rating: float,
         featured: bool = False, blurb: str = "") -> Experience:
    return Experience(
        experience_id=eid,
        title=title,
        category=category,
        duration_hours=hours,
        rating=rating,
        is_featured=featured,
        short_description=blurb,
    )


_MELBOURNE_EXPERIENCES: list[Experience] = [
    _exp(101, "Melbourne Laneways & Hidden Bars Food Tour", "food", 3.0, 4.8, True,
         "Tastings at hidden bars and hole-in-the-wall eateries with a local guide."),
    _exp(102, "Queen Victoria Market Foodie Tour", "food", 2.5, 4.7, True,
         "Guided tasting tour through Queen Victoria Market."),
    _exp(103, "Melbourne Coffee Culture Walking Tour", "food", 2.0, 4.9, False,
         "Small-group walk through the city's backstreet cafes."),
    _exp(104, "Yarra Valley Wine & Food Day Tour", "food", 8.0, 4.7),
    _exp(105, "South Melbourne Market Grazing Tour", "food", 2.0, 4.5),
    _exp(201, "Melbourne Street Art & Laneways Tour", "culture", 2.0, 4.8, False,
         "Laneways and street art hotspots led by a working street artist."),
    _exp(202, "NGV & Arts Precinct Guided Tour", "culture", 2.5, 4.5),
    _exp(203, "Aboriginal Heritage Walking Tour", "culture", 2.0, 4.9),
    _exp(204, "Royal Botanic Gardens Guided Walk", "culture", 1.5, 4.5),
    _exp(301, "Great Ocean Road & 12 Apostles Day Trip", "adventure", 12.0, 4.7, True),
    _exp(302, "Melbourne Bike Tour: Bayside & St Kilda", "adventure", 3.0, 4.8),
    _exp(303, "Helicopter Flight Over Melbourne", "adventure", 0.5, 4.9, False,
         "Flight over the skyline, the MCG and Port Phillip Bay."),
    _exp(304, "Kayak Melbourne: Yarra River Paddle", "adventure", 2.5, 4.7),
    _exp(401, "Phillip Island Penguin Parade Tour", "daytrip", 8.0, 4.6, True),
    _exp(402, "Puffing Billy Steam Train & Dandenong Ranges", "daytrip", 6.0, 4.5),
    _exp(403, "Healesville Sanctuary Wildlife Experience", "daytrip", 5.0, 4.6),
    _exp(501, "Hidden Speakeasy & Cocktail Tour", "nightlife", 3.0, 4.7),
    _exp(502, "Melbourne Rooftop Bar Crawl", "nightlife", 3.5, 4.5),
    _exp(503, "Haunted Melbourne Ghost Tour", "nightlife", 2.0, 4.4),
]


class StubEventCatalog(EventCatalog):
    """In-process catalog; defaults to the Melbourne 2026 weekend."""

    def __init__(
        self,
        events: list[RaceEvent] | None = None,
        sessions: dict[int, list[FixedSession]] | None = None,
        experiences: dict[int, list[Experience]] | None = None,
    ) -> None:
        if events is None:
            events = [_MELBOURNE]
            sessions = {_MELBOURNE.event_id: _MELBOURNE_SESSIONS}
            experiences = {_MELBOURNE.event_id: _MELBOURNE_EXPERIENCES}
        self._events = {e.slug: e for e in events}
        self._sessions = sessions or {}
        self._experiences = experiences or {}

    def get_event(self, slug: str) -> Optional[RaceEvent]:
        return self._events.get(slug)

    def get_sessions_for_event(self, event_id: int) -> list[FixedSession]:
        rank = {day: idx for idx, day in enumerate(EVENT_DAY_ORDER)}
        return sorted(
            self._sessions.get(event_id, []),
            key=lambda s: (rank.get(s.day_of_week, len(rank)), s.start_time),
        )

    def get_experiences_for_event(self, event_id: int) -> list[Experience]:
        return list(self._experiences.get(event_id, []))


# ─────────────────────────────────────────────────────────────────────────────
# PostgreSQL catalog
# ─────────────────────────────────────────────────────────────────────────────

class PostgresEventCatalog(EventCatalog):
    """Catalog backed by the shared races / sessions / experiences tables."""

    def get_event(self, slug: str) -> Optional[RaceEvent]:
        try:
            with get_conn() as conn:
                return catalog_repo.get_race_by_slug(conn, slug)
        except psycopg2.Error as exc:
            logger.error("Catalog query failed for race %r: %s", slug, exc)
            raise CatalogUnavailableError(f"Could not load race {slug!r}") from exc

    def get_sessions_for_event(self, event_id: int) -> list[FixedSession]:
        try:
            with get_conn() as conn:
                return catalog_repo.get_sessions_for_race(conn, event_id)
        except psycopg2.Error as exc:
            logger.error("Catalog query failed for sessions of race %s: %s", event_id, exc)
            raise CatalogUnavailableError("Could not load event sessions") from exc

    def get_experiences_for_event(self, event_id: int) -> list[Experience]:
        try:
            with get_conn() as conn:
                return catalog_repo.get_experiences_for_race(conn, event_id)
        except psycopg2.Error as exc:
            logger.error("Catalog query failed for experiences of race %s: %s", event_id, exc)
            raise CatalogUnavailableError("Could not load event experiences") from exc


def get_event_catalog() -> EventCatalog:
    """Catalog selected by CATALOG_BACKEND ("stub" | "postgres")."""
    if config.CATALOG_BACKEND == "postgres":
        return PostgresEventCatalog()
    if config.CATALOG_BACKEND == "stub":
        return StubEventCatalog()
    raise ValueError(f"Unknown CATALOG_BACKEND: {config.CATALOG_BACKEND!r}")
