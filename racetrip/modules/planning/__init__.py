"""
modules/planning package — deterministic itinerary construction.

    time_grid            → one GridDay per day of the trip
    gap_extractor        → free intervals between fixed sessions
    experience_matcher   → best unused experience for a gap
    itinerary_assembler  → day slots + narrative → Itinerary
"""
from racetrip.modules.planning.experience_matcher import ExperiencePool, select_experience
from racetrip.modules.planning.gap_extractor import extract_gaps, scan_day
from racetrip.modules.planning.itinerary_assembler import ItineraryAssembler, assemble_day
from racetrip.modules.planning.time_grid import GridDay, build_time_grid

__all__ = [
    "ExperiencePool",
    "select_experience",
    "extract_gaps",
    "scan_day",
    "ItineraryAssembler",
    "assemble_day",
    "GridDay",
    "build_time_grid",
]
