"""
schemas package — frozen dataclasses shared by every module.
"""
from racetrip.schemas.catalog import (
    CATEGORIES,
    EVENT_DAY_ORDER,
    Experience,
    FixedSession,
    RaceEvent,
)
from racetrip.schemas.itinerary import (
    DaySlot,
    ExperienceSlot,
    FreeSlot,
    Itinerary,
    ItineraryDay,
    SessionSlot,
    TimeInterval,
    TripWindow,
)

__all__ = [
    "CATEGORIES",
    "EVENT_DAY_ORDER",
    "Experience",
    "FixedSession",
    "RaceEvent",
    "DaySlot",
    "ExperienceSlot",
    "FreeSlot",
    "Itinerary",
    "ItineraryDay",
    "SessionSlot",
    "TimeInterval",
    "TripWindow",
]
