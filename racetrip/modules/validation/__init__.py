"""
modules/validation package — request and catalog guards before assembly.
"""
from racetrip.modules.validation.trip_validator import (
    ValidationResult,
    filter_valid,
    require_valid_trip,
    validate_experience,
    validate_trip,
)

__all__ = [
    "ValidationResult",
    "filter_valid",
    "require_valid_trip",
    "validate_experience",
    "validate_trip",
]
