"""
itinerary_service.py
--------------------
Create / read operations exposed to the request-handling layer.

  create_itinerary(trip) -> identifier
    1. validate trip window             (InvalidRangeError)
    2. resolve event, fetch catalog     (UnknownEventError, CatalogUnavailableError;
                                         InvalidRangeError for unknown session ids)
    3. assemble days + narrative        (never fails on narrative)
    4. store                            (StorageError)

  get_itinerary(identifier) -> Itinerary | None

Steps 1-2 fail before any assembly or store write.
"""

from __future__ import annotations

import logging
from typing import Optional

from racetrip.db.itinerary_store import ItineraryStore, get_itinerary_store
from racetrip.errors import CatalogUnavailableError, InvalidRangeError, UnknownEventError
from racetrip.modules.observability.logger import EventLog
from racetrip.modules.planning.itinerary_assembler import ItineraryAssembler
from racetrip.modules.tool_usage.catalog_tool import EventCatalog, get_event_catalog
from racetrip.modules.validation import filter_valid, require_valid_trip, validate_experience
from racetrip.schemas.itinerary import Itinerary, TripWindow

logger = logging.getLogger(__name__)
_events = EventLog("itinerary")


class ItineraryService:
    def __init__(
        self,
        catalog: EventCatalog | None = None,
        store: ItineraryStore | None = None,
        assembler: ItineraryAssembler | None = None,
    ) -> None:
        # An empty InMemoryItineraryStore is falsy.
        self.catalog = catalog if catalog is not None else get_event_catalog()
        self.store = store if store is not None else get_itinerary_store()
        self.assembler = assembler if assembler is not None else ItineraryAssembler()

    def create_itinerary(self, trip: TripWindow) -> str:
        """Build, persist and return the identifier of a new itinerary."""
        require_valid_trip(trip)

        event = self.catalog.get_event(trip.event_slug)
        if event is None:
            raise UnknownEventError(trip.event_slug)
        if event.race_date is None:
            raise CatalogUnavailableError(f"Race {event.slug!r} has no race date in the catalog")
        sessions = self.catalog.get_sessions_for_event(event.event_id)
        if trip.session_ids is not None:
            unknown = sorted(trip.session_ids - {s.session_id for s in sessions})
            if unknown:
                raise InvalidRangeError(
                    f"Unknown session id(s) for {event.slug}: {', '.join(map(str, unknown))}"
                )
        experiences = filter_valid(
            self.catalog.get_experiences_for_event(event.event_id),
            validate_experience,
        )

        itinerary = self.assembler.assemble(trip, event, sessions, experiences)
        itinerary_id = self.store.put(itinerary)

        _events.emit("ITINERARY_STORED", {
            "itinerary_id": itinerary_id,
            "race": event.slug,
            "arrival_day": trip.arrival_day,
            "departure_day": trip.departure_day,
            "interests": sorted(trip.interests),
            "generation_model": itinerary.generation_model,
        })
        logger.info("Stored itinerary %s for %s", itinerary_id, event.slug)
        return itinerary_id

    def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        """Stored itinerary or None; no side effects."""
        return self.store.get(itinerary_id)
