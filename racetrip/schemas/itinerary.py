"""
schemas/itinerary.py
--------------------
Dataclass definitions for the traveler input and the generated itinerary.

DaySlot is a closed union of three frozen dataclasses:
  SessionSlot     — a fixed event session, copied verbatim
  ExperienceSlot  — a recommended experience placed in a free gap
  FreeSlot        — an unfilled gap

``slot_to_dict`` / ``slot_from_dict`` are the only (de)serialisers and match
the union exhaustively; an unknown variant is a programming error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional, Union


# ── Time helpers ─────────────────────────────────────────────────────────────

def t2m(t: time) -> int:
    """Convert a time object to integer minutes-from-midnight."""
    return t.hour * 60 + t.minute


def m2t(mins: int) -> time:
    """Convert minutes-from-midnight to a time object (clamped to [0, 1439])."""
    mins = max(0, min(int(mins), 23 * 60 + 59))
    return time(mins // 60, mins % 60)


def parse_hhmm(value: str) -> time:
    """Parse ``"HH:MM"`` into a time object."""
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


def fmt_hhmm(t: time) -> str:
    return t.strftime("%H:%M")


@dataclass(frozen=True)
class TimeInterval:
    """Half-open ``[start, end)`` interval within one day."""
    start: time
    end: time

    @property
    def minutes(self) -> int:
        return max(0, t2m(self.end) - t2m(self.start))

    def __str__(self) -> str:
        return f"{fmt_hhmm(self.start)}-{fmt_hhmm(self.end)}"


# ── Traveler input ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TripWindow:
    """
    Traveler-supplied request.

    ``interests`` may be empty: the matcher then treats every category as
    acceptable.  ``session_ids`` lists the sessions the traveler attends;
    None keeps every session of the event.
    """
    event_slug: str
    arrival_day: str
    departure_day: str
    interests: frozenset[str] = field(default_factory=frozenset)
    note: Optional[str] = None
    group_size: Optional[int] = None
    session_ids: Optional[frozenset[int]] = None


# ── Day slots ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionSlot:
    start: time
    end: time
    session_id: int
    name: str
    short_name: str = ""
    session_type: str = "event"
    series: str = ""


@dataclass(frozen=True)
class ExperienceSlot:
    start: time
    end: time
    experience_id: int
    title: str
    category: str
    note: str = ""


@dataclass(frozen=True)
class FreeSlot:
    start: time
    end: time
    note: str = ""


DaySlot = Union[SessionSlot, ExperienceSlot, FreeSlot]


@dataclass(frozen=True)
class ItineraryDay:
    """One calendar day of the plan."""
    date: date
    day_label: str
    slots: tuple[DaySlot, ...] = ()


@dataclass(frozen=True)
class Itinerary:
    """
    Top-level output of the engine.

    ``itinerary_id`` is empty until the store assigns one at ``put`` time.
    ``generation_model`` is ``"fallback"`` when the narrative came from the
    deterministic template rather than the LLM.
    """
    itinerary_id: str
    title: str
    summary: str
    days: tuple[ItineraryDay, ...] = ()
    event_slug: str = ""
    arrival_day: str = ""
    departure_day: str = ""
    interests: tuple[str, ...] = ()
    group_size: int = 1
    note: Optional[str] = None
    generation_model: str = ""
    prompt_hash: str = ""
    generated_at: str = ""  # ISO-8601 timestamp

    @property
    def experience_ids(self) -> list[int]:
        return [
            slot.experience_id
            for day in self.days
            for slot in day.slots
            if isinstance(slot, ExperienceSlot)
        ]


# ── Serialisers ──────────────────────────────────────────────────────────────

def _times(slot: DaySlot) -> dict:
    return {"start_time": fmt_hhmm(slot.start), "end_time": fmt_hhmm(slot.end)}


def slot_to_dict(slot: DaySlot) -> dict:
    if isinstance(slot, SessionSlot):
        return {
            "type": "session",
            **_times(slot),
            "session_id":   slot.session_id,
            "name":         slot.name,
            "short_name":   slot.short_name,
            "session_type": slot.session_type,
            "series":       slot.series,
        }
    if isinstance(slot, ExperienceSlot):
        return {
            "type": "experience",
            **_times(slot),
            "experience_id": slot.experience_id,
            "title":         slot.title,
            "category":      slot.category,
            "note":          slot.note,
        }
    if isinstance(slot, FreeSlot):
        return {"type": "free", **_times(slot), "note": slot.note}
    raise TypeError(f"Unknown day slot type: {type(slot).__name__}")


def slot_from_dict(data: dict) -> DaySlot:
    kind = data.get("type")
    start = parse_hhmm(data["start_time"])
    end = parse_hhmm(data["end_time"])
    if kind == "session":
        return SessionSlot(
            start=start,
            end=end,
            session_id=int(data["session_id"]),
            name=data["name"],
            short_name=data.get("short_name", ""),
            session_type=data.get("session_type", "event"),
            series=data.get("series", ""),
        )
    if kind == "experience":
        return ExperienceSlot(
            start=start,
            end=end,
            experience_id=int(data["experience_id"]),
            title=data["title"],
            category=data["category"],
            note=data.get("note", ""),
        )
    if kind == "free":
        return FreeSlot(start=start, end=end, note=data.get("note", ""))
    raise ValueError(f"Unknown day slot type: {kind!r}")


def itinerary_to_dict(it: Itinerary) -> dict:
    return {
        "id":               it.itinerary_id,
        "title":            it.title,
        "summary":          it.summary,
        "event_slug":       it.event_slug,
        "arrival_day":      it.arrival_day,
        "departure_day":    it.departure_day,
        "interests":        list(it.interests),
        "group_size":       it.group_size,
        "note":             it.note,
        "generation_model": it.generation_model,
        "prompt_hash":      it.prompt_hash,
        "generated_at":     it.generated_at,
        "days": [
            {
                "date":      d.date.isoformat(),
                "day_label": d.day_label,
                "slots":     [slot_to_dict(s) for s in d.slots],
            }
            for d in it.days
        ],
    }


def itinerary_from_dict(data: dict) -> Itinerary:
    return Itinerary(
        itinerary_id=data["id"],
        title=data["title"],
        summary=data["summary"],
        days=tuple(
            ItineraryDay(
                date=date.fromisoformat(d["date"]),
                day_label=d["day_label"],
                slots=tuple(slot_from_dict(s) for s in d["slots"]),
            )
            for d in data.get("days", [])
        ),
        event_slug=data.get("event_slug", ""),
        arrival_day=data.get("arrival_day", ""),
        departure_day=data.get("departure_day", ""),
        interests=tuple(data.get("interests", [])),
        group_size=int(data.get("group_size", 1)),
        note=data.get("note"),
        generation_model=data.get("generation_model", ""),
        prompt_hash=data.get("prompt_hash", ""),
        generated_at=data.get("generated_at", ""),
    )
