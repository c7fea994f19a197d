"""
modules/planning/itinerary_assembler.py
---------------------------------------
Itinerary Assembler — grid → gaps → matches → day slots → narrative.

For each grid day, in day order:
  1. scan_day() splits the active window into accepted sessions and gaps.
  2. Each gap is offered to the matcher with the current ExperiencePool.
  3. Slots are built:
       session          → SessionSlot, times copied verbatim
       matched gap      → ExperienceSlot sized to the experience, placed by
                          EXPERIENCE_ALIGNMENT; leftover pieces of at least
                          MIN_USEFUL_GAP_MINUTES become FreeSlots, shorter
                          ones are absorbed by the experience slot
       unmatched gap    → FreeSlot
  4. The pool returned by the matcher is carried into the next gap / day.

Slots of a day therefore tile its active window exactly.

The assembled Itinerary has an empty id; ItineraryStore.put assigns it.
"""

from __future__ import annotations

import logging
import time as _time_mod
from dataclasses import dataclass
from datetime import datetime, timezone

from racetrip import config
from racetrip.modules.narrative.narrative_generator import (
    NarrativeContext,
    NarrativeGenerator,
)
from racetrip.modules.observability.logger import EventLog
from racetrip.modules.planning.experience_matcher import ExperiencePool, select_experience
from racetrip.modules.planning.gap_extractor import scan_day
from racetrip.modules.planning.time_grid import GridDay, build_time_grid
from racetrip.schemas.catalog import CATEGORY_LABELS, Experience, FixedSession, RaceEvent
from racetrip.schemas.itinerary import (
    DaySlot,
    ExperienceSlot,
    FreeSlot,
    Itinerary,
    ItineraryDay,
    SessionSlot,
    TimeInterval,
    TripWindow,
    m2t,
    t2m,
)

logger = logging.getLogger(__name__)
_events = EventLog("itinerary")

FREE_SLOT_NOTE = "Open time, explore on your own"


@dataclass(frozen=True)
class AssembledDay:
    day: ItineraryDay
    pool: ExperiencePool


# ── Slot builders ────────────────────────────────────────────────────────────

def _session_slot(s: FixedSession) -> SessionSlot:
    return SessionSlot(
        start=s.start_time,
        end=s.end_time,
        session_id=s.session_id,
        name=s.name,
        short_name=s.short_name,
        session_type=s.session_type,
        series=s.series,
    )


def _experience_note(e: Experience) -> str:
    if e.short_description:
        return e.short_description
    label = CATEGORY_LABELS.get(e.category, e.category.title())
    return f"{label} experience, about {e.duration_hours:g}h"


def _place_in_gap(
    gap: TimeInterval,
    experience: Experience,
    alignment: str,
    min_useful: int,
) -> list[DaySlot]:
    """
    Slots covering ``gap`` exactly: one ExperienceSlot plus any FreeSlots
    left over.  Leftovers shorter than ``min_useful`` are folded into the
    experience slot and mentioned in its note.
    """
    g_start, g_end = t2m(gap.start), t2m(gap.end)
    duration = experience.duration_minutes
    spare = (g_end - g_start) - duration
    lead = spare // 2 if alignment == "center" else 0
    trail = spare - lead

    e_start, e_end = g_start + lead, g_end - trail
    slots: list[DaySlot] = []
    absorbed = 0

    if lead >= min_useful:
        slots.append(FreeSlot(start=gap.start, end=m2t(e_start), note=FREE_SLOT_NOTE))
    elif lead > 0:
        absorbed += lead
        e_start = g_start

    trailing: FreeSlot | None = None
    if trail >= min_useful:
        trailing = FreeSlot(start=m2t(e_end), end=gap.end, note=FREE_SLOT_NOTE)
    elif trail > 0:
        absorbed += trail
        e_end = g_end

    note = _experience_note(experience)
    if absorbed:
        note = f"{note} Includes {absorbed} min of buffer time."
    slots.append(ExperienceSlot(
        start=m2t(e_start),
        end=m2t(e_end),
        experience_id=experience.experience_id,
        title=experience.title,
        category=experience.category,
        note=note,
    ))
    if trailing is not None:
        slots.append(trailing)
    return slots


def assemble_day(
    grid_day: GridDay,
    interests: frozenset[str],
    pool: ExperiencePool,
    alignment: str | None = None,
    min_useful: int | None = None,
) -> AssembledDay:
    """Build one ItineraryDay and return it with the pool left after it."""
    alignment = alignment or config.EXPERIENCE_ALIGNMENT
    min_useful = config.MIN_USEFUL_GAP_MINUTES if min_useful is None else min_useful

    scan = scan_day(grid_day.window, grid_day.sessions)
    slots: list[DaySlot] = [_session_slot(s) for s in scan.sessions]

    for gap in scan.gaps:
        match = select_experience(gap, interests, pool)
        pool = match.pool
        if match.experience is None:
            slots.append(FreeSlot(start=gap.start, end=gap.end, note=FREE_SLOT_NOTE))
        else:
            slots.extend(_place_in_gap(gap, match.experience, alignment, min_useful))

    slots.sort(key=lambda s: t2m(s.start))
    day = ItineraryDay(date=grid_day.date, day_label=grid_day.weekday, slots=tuple(slots))
    return AssembledDay(day=day, pool=pool)


# ── Assembler ────────────────────────────────────────────────────────────────

class ItineraryAssembler:
    """
    Orchestrates the time grid, gap extraction, matching and narrative.

    Days are processed sequentially; the ExperiencePool from day N is the
    input pool of day N+1, which keeps results reproducible.
    """

    def __init__(self, narrative: NarrativeGenerator | None = None) -> None:
        self.narrative = narrative or NarrativeGenerator()

    def build_days(
        self,
        trip: TripWindow,
        event: RaceEvent,
        sessions: list[FixedSession],
        experiences: list[Experience],
    ) -> list[ItineraryDay]:
        if event.race_date is None:
            raise ValueError(f"Event {event.slug!r} has no race date")
        grid = build_time_grid(
            trip.arrival_day, trip.departure_day, event.race_date, sessions, trip.session_ids
        )
        pool = ExperiencePool.from_catalog(experiences)
        days: list[ItineraryDay] = []
        for grid_day in grid:
            assembled = assemble_day(grid_day, trip.interests, pool)
            pool = assembled.pool
            days.append(assembled.day)
        return days

    def assemble(
        self,
        trip: TripWindow,
        event: RaceEvent,
        sessions: list[FixedSession],
        experiences: list[Experience],
    ) -> Itinerary:
        """
        Generate the complete itinerary for ``trip``.

        Args:
            trip:        Validated traveler window.
            event:       Race weekend the trip belongs to.
            sessions:    All fixed sessions of the event.
            experiences: Candidate experiences (may be empty).

        Returns:
            Itinerary with title / summary set and an empty identifier.
        """
        _t0 = _time_mod.perf_counter()
        days = self.build_days(trip, event, sessions, experiences)

        titles = tuple(
            slot.title for d in days for slot in d.slots if isinstance(slot, ExperienceSlot)
        )
        interests = tuple(sorted(trip.interests))
        narrative = self.narrative.compose(NarrativeContext(
            race_name=event.name,
            city=event.city,
            day_count=len(days),
            experience_titles=titles,
            interests=interests,
            arrival_day=trip.arrival_day,
            departure_day=trip.departure_day,
            group_size=trip.group_size,
            note=trip.note,
        ))

        itinerary = Itinerary(
            itinerary_id="",
            title=narrative.title,
            summary=narrative.summary,
            days=tuple(days),
            event_slug=event.slug,
            arrival_day=trip.arrival_day,
            departure_day=trip.departure_day,
            interests=interests,
            group_size=trip.group_size or 1,
            note=trip.note,
            generation_model=narrative.source,
            prompt_hash=narrative.prompt_hash,
            generated_at=datetime.now(timezone.utc).isoformat(),
        )

        elapsed_ms = round((_time_mod.perf_counter() - _t0) * 1000, 2)
        _events.emit("ITINERARY_ASSEMBLED", {
            "race": event.slug,
            "days": len(days),
            "experiences": len(titles),
            "narrative": narrative.source,
            "elapsed_ms": elapsed_ms,
        })
        logger.info("Assembled %d-day itinerary for %s with %d experience(s) in %.1f ms",
                    len(days), event.slug, len(titles), elapsed_ms)
        return itinerary
