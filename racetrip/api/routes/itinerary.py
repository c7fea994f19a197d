"""
api/routes/itinerary.py
------------------------
POST /v1/itinerary        — build and store a personalised race-weekend plan
GET  /v1/itinerary/{id}   — fetch a stored plan

Error mapping:
    InvalidRangeError        → 422
    UnknownEventError        → 404
    CatalogUnavailableError  → 503
    StorageError             → 503
    unknown id on read       → 404
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from racetrip import config
from racetrip.errors import (
    CatalogUnavailableError,
    InvalidRangeError,
    StorageError,
    UnknownEventError,
)
from racetrip.itinerary_service import ItineraryService
from racetrip.schemas.itinerary import TripWindow, itinerary_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()

DayLabel = Literal["Wednesday", "Thursday", "Friday", "Saturday", "Sunday", "Monday", "Tuesday"]
Interest = Literal["food", "culture", "adventure", "daytrip", "nightlife"]

_service: ItineraryService | None = None


def get_itinerary_service() -> ItineraryService:
    """Process-wide service built from config on first use."""
    global _service
    if _service is None:
        _service = ItineraryService()
    return _service


# ── Request / Response schemas ─────────────────────────────────────────────────

class CreateItineraryRequest(BaseModel):
    race_slug: str = Field(default_factory=lambda: config.DEFAULT_RACE_SLUG, min_length=1)
    arrival_day: DayLabel
    departure_day: DayLabel
    interests: list[Interest] = Field(default_factory=list)
    note: Optional[str] = Field(None, max_length=500)
    group_size: Optional[int] = Field(None, ge=1, le=50)
    # Sessions the traveler attends; omitted means every session.
    session_ids: Optional[list[int]] = None

    def to_trip_window(self) -> TripWindow:
        return TripWindow(
            event_slug=self.race_slug,
            arrival_day=self.arrival_day,
            departure_day=self.departure_day,
            interests=frozenset(self.interests),
            note=self.note,
            group_size=self.group_size,
            session_ids=frozenset(self.session_ids) if self.session_ids is not None else None,
        )


class CreateItineraryResponse(BaseModel):
    id: str


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateItineraryResponse,
    summary="Generate and store a race-weekend itinerary",
)
def create_itinerary(
    req: CreateItineraryRequest,
    service: ItineraryService = Depends(get_itinerary_service),
) -> CreateItineraryResponse:
    try:
        itinerary_id = service.create_itinerary(req.to_trip_window())
    except InvalidRangeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except UnknownEventError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (CatalogUnavailableError, StorageError) as exc:
        logger.error("Itinerary creation failed: %s", exc)
        raise HTTPException(
            status_code=503,
            detail="Itinerary service temporarily unavailable, please retry",
        ) from exc
    return CreateItineraryResponse(id=itinerary_id)


@router.get("/{itinerary_id}", summary="Fetch a stored itinerary")
def read_itinerary(
    itinerary_id: str,
    service: ItineraryService = Depends(get_itinerary_service),
) -> dict:
    try:
        itinerary = service.get_itinerary(itinerary_id)
    except StorageError as exc:
        logger.error("Itinerary read failed for %s: %s", itinerary_id, exc)
        raise HTTPException(
            status_code=503,
            detail="Itinerary service temporarily unavailable, please retry",
        ) from exc
    if itinerary is None:
        raise HTTPException(status_code=404, detail=f"Itinerary '{itinerary_id}' not found")
    return itinerary_to_dict(itinerary)
