"""
modules/planning/experience_matcher.py
--------------------------------------
Experience Matcher — picks at most one experience for a free gap.

Selection:
  1. Fit:       duration_minutes <= gap.minutes (no partial placement)
  2. Interest:  category in the traveler's interests; when nothing matches
                (or interests are empty) fall back to every fitting candidate
  3. Rank:      featured desc → rating desc → duration desc → id asc
  4. Consume:   the winner is removed from the pool for later gaps

The consumed set lives in an immutable ``ExperiencePool`` that the caller
threads through gaps and days in order; ``select_experience`` returns the
next pool instead of mutating anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from racetrip.schemas.catalog import Experience
from racetrip.schemas.itinerary import TimeInterval


@dataclass(frozen=True)
class ExperiencePool:
    """Catalog candidates for one assembly run plus the ids already placed."""
    candidates: tuple[Experience, ...] = ()
    consumed: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def from_catalog(cls, experiences: Iterable[Experience]) -> "ExperiencePool":
        return cls(candidates=tuple(experiences))

    def available(self) -> list[Experience]:
        return [e for e in self.candidates if e.experience_id not in self.consumed]

    def consume(self, experience: Experience) -> "ExperiencePool":
        return ExperiencePool(
            candidates=self.candidates,
            consumed=self.consumed | {experience.experience_id},
        )


@dataclass(frozen=True)
class MatchResult:
    experience: Optional[Experience]
    pool: ExperiencePool


def _rank_key(e: Experience) -> tuple:
    return (not e.is_featured, -e.rating, -e.duration_minutes, e.experience_id)


def rank_candidates(
    gap: TimeInterval,
    interests: Iterable[str],
    candidates: Iterable[Experience],
) -> list[Experience]:
    """Eligible candidates for ``gap`` in selection order (best first)."""
    fitting = [e for e in candidates if 0 < e.duration_minutes <= gap.minutes]
    wanted = set(interests)
    preferred = [e for e in fitting if e.category in wanted] if wanted else []
    return sorted(preferred or fitting, key=_rank_key)


def select_experience(
    gap: TimeInterval,
    interests: Iterable[str],
    pool: ExperiencePool,
) -> MatchResult:
    """Return the best unused experience for ``gap`` and the updated pool."""
    ranked = rank_candidates(gap, interests, pool.available())
    if not ranked:
        return MatchResult(experience=None, pool=pool)
    best = ranked[0]
    return MatchResult(experience=best, pool=pool.consume(best))
