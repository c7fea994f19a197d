"""
modules/narrative package — itinerary title / summary with a guaranteed fallback.
"""
from racetrip.modules.narrative.narrative_generator import (
    Narrative,
    NarrativeContext,
    NarrativeGenerator,
)

__all__ = ["Narrative", "NarrativeContext", "NarrativeGenerator"]
