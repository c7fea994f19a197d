"""racetrip — race-weekend itinerary generation engine."""

__version__ = "0.1.0"
