"""
modules/validation/trip_validator.py
------------------------------------
Guards applied before any assembly work starts.

  Trip window:
    ✓ arrival_day / departure_day are event weekdays
    ✓ arrival_day is not after departure_day
    ✓ interest tags are known categories (empty set = match anything)
    ✓ group_size >= 1 when given
    ✓ event slug is non-empty

  Catalog experience:
    ✓ known category
    ✓ duration_hours > 0
    ✓ non-empty title

Usage:
    from racetrip.modules.validation import require_valid_trip, filter_valid

    require_valid_trip(trip)                      # raises InvalidRangeError
    clean = filter_valid(experiences, validate_experience)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from racetrip.errors import InvalidRangeError
from racetrip.schemas.catalog import CATEGORIES, EVENT_DAY_ORDER, Experience
from racetrip.schemas.itinerary import TripWindow

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
    """
    valid: bool
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


def validate_trip(trip: TripWindow) -> ValidationResult:
    errors: list[str] = []

    if not trip.event_slug:
        errors.append("event slug is required")

    days_known = True
    for name, label in (("arrival_day", trip.arrival_day), ("departure_day", trip.departure_day)):
        if label not in EVENT_DAY_ORDER:
            days_known = False
            errors.append(f"{name} {label!r} must be one of {', '.join(EVENT_DAY_ORDER)}")
    if days_known and EVENT_DAY_ORDER.index(trip.arrival_day) > EVENT_DAY_ORDER.index(trip.departure_day):
        errors.append(
            f"arrival_day ({trip.arrival_day}) must not be after departure_day ({trip.departure_day})"
        )

    unknown = sorted(set(trip.interests) - set(CATEGORIES))
    if unknown:
        errors.append(f"unknown interest(s) {', '.join(unknown)}; expected {', '.join(CATEGORIES)}")

    if trip.group_size is not None and trip.group_size < 1:
        errors.append(f"group_size must be >= 1, got {trip.group_size}")

    return ValidationResult(valid=not errors, errors=errors)


def require_valid_trip(trip: TripWindow) -> None:
    """Raise InvalidRangeError listing every problem with ``trip``."""
    result = validate_trip(trip)
    if not result:
        raise InvalidRangeError("; ".join(result.errors))


def validate_experience(experience: Experience) -> ValidationResult:
    errors: list[str] = []
    if not experience.title.strip():
        errors.append("title is empty")
    if experience.category not in CATEGORIES:
        errors.append(f"unknown category {experience.category!r}")
    if experience.duration_hours <= 0:
        errors.append(f"duration_hours must be > 0, got {experience.duration_hours}")
    return ValidationResult(valid=not errors, errors=errors)


def filter_valid(records: list[T], validator: Callable[[Any], ValidationResult]) -> list[T]:
    """Keep records that pass ``validator``; log and drop the rest."""
    kept: list[T] = []
    for record in records:
        result = validator(record)
        if result:
            kept.append(record)
        else:
            logger.warning("Dropping invalid catalog record %r: %s", record, "; ".join(result.errors))
    return kept
