"""
schemas/catalog.py
------------------
Read-only records supplied by the event catalog: the race weekend itself,
its fixed sessions and the bookable experiences around it.

Times are local to the event timezone.  Durations on experiences are hours
(fractional allowed), matching the catalog's ``duration_hours`` column.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, time
from typing import Optional

# Weekdays a traveler may arrive / depart on, in event order.
# Offsets are relative to the race date (Sunday).
EVENT_DAY_ORDER: tuple[str, ...] = (
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
)
EVENT_DAY_OFFSETS: dict[str, int] = {
    day: idx - EVENT_DAY_ORDER.index("Sunday") for idx, day in enumerate(EVENT_DAY_ORDER)
}

CATEGORIES: tuple[str, ...] = ("food", "culture", "adventure", "daytrip", "nightlife")
CATEGORY_LABELS: dict[str, str] = {
    "food":      "Food & Drink",
    "culture":   "Culture",
    "adventure": "Adventure",
    "daytrip":   "Day Trip",
    "nightlife": "Nightlife",
}

SESSION_TYPES: tuple[str, ...] = ("practice", "qualifying", "sprint", "race", "support", "event")


@dataclass(frozen=True)
class RaceEvent:
    """A race weekend.  ``race_date`` is the Sunday; other days derive from it."""
    event_id: int
    slug: str
    name: str
    city: str
    country: str = ""
    timezone: str = ""
    race_date: Optional[date] = None


@dataclass(frozen=True)
class FixedSession:
    """An immovable block on the event schedule."""
    session_id: int
    name: str
    day_of_week: str
    start_time: time
    end_time: time
    session_type: str = "event"
    short_name: str = ""
    series: str = "Formula 1"


@dataclass(frozen=True)
class Experience:
    """A bookable activity offered around the event."""
    experience_id: int
    title: str
    category: str
    duration_hours: float
    rating: float = 0.0
    is_featured: bool = False
    slug: str = ""
    short_description: str = ""
    price_label: str = ""
    affiliate_url: str = ""

    @property
    def duration_minutes(self) -> int:
        """Duration rounded up to whole minutes: a 1.25h tour needs 75 min."""
        return int(math.ceil(self.duration_hours * 60 - 1e-9))
