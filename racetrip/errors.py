"""
errors.py
---------
Error taxonomy for itinerary creation and retrieval.

  InvalidRangeError        — bad trip window (caller error, 4xx)
  UnknownEventError        — race slug not in the catalog (404)
  CatalogUnavailableError  — sessions / experiences could not be fetched (retryable)
  StorageError             — identifier generation or persistence failed (retryable)

Narrative-generation failures are never raised; they are absorbed into the
fallback text.  A missing itinerary on read is ``None``, not an error.
"""

from __future__ import annotations


class ItineraryError(Exception):
    """Base class for every error the engine propagates to its caller."""

    retryable: bool = False


class InvalidRangeError(ItineraryError):
    """The trip window is not usable (reversed range, unknown day or tag)."""


class UnknownEventError(ItineraryError):
    """No event in the catalog matches the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Race not found: {slug!r}")
        self.slug = slug


class CatalogUnavailableError(ItineraryError):
    """The event catalog could not be queried."""

    retryable = True


class StorageError(ItineraryError):
    """The itinerary store failed to mint an identifier or persist / read a record."""

    retryable = True
