from unittest.mock import MagicMock

import pytest

from racetrip.errors import (
    CatalogUnavailableError,
    InvalidRangeError,
    StorageError,
    UnknownEventError,
)
from racetrip.itinerary_service import ItineraryService
from racetrip.modules.narrative.narrative_generator import NarrativeGenerator
from racetrip.modules.planning.itinerary_assembler import ItineraryAssembler
from racetrip.modules.tool_usage.catalog_tool import EventCatalog, StubEventCatalog
from racetrip.modules.validation import validate_trip
from racetrip.schemas.catalog import RaceEvent
from racetrip.schemas.itinerary import ExperienceSlot, SessionSlot, TripWindow

from conftest import SlowTextGenerator, make_experience


def _trip(arrival="Thursday", departure="Sunday", interests=("food",), slug="melbourne-2026", **extra):
    return TripWindow(
        event_slug=slug,
        arrival_day=arrival,
        departure_day=departure,
        interests=frozenset(interests),
        **extra,
    )


def test_create_then_get(melbourne_service, memory_store):
    itinerary_id = melbourne_service.create_itinerary(_trip(group_size=3, note="window seats"))
    itinerary = melbourne_service.get_itinerary(itinerary_id)

    assert itinerary.itinerary_id == itinerary_id
    assert [d.day_label for d in itinerary.days] == ["Thursday", "Friday", "Saturday", "Sunday"]
    assert itinerary.group_size == 3
    assert itinerary.note == "window seats"
    assert itinerary.title == "Melbourne Weekend Plan"
    assert len(memory_store) == 1

    race = [s for d in itinerary.days for s in d.slots if isinstance(s, SessionSlot) and s.session_type == "race"]
    assert [r.name for r in race] == ["Grand Prix"]


def test_reads_have_no_side_effects(melbourne_service):
    itinerary_id = melbourne_service.create_itinerary(_trip())
    assert melbourne_service.get_itinerary(itinerary_id) == melbourne_service.get_itinerary(itinerary_id)


def test_unknown_id_returns_none(melbourne_service):
    assert melbourne_service.get_itinerary("nope") is None


def test_reversed_range_fails_before_catalog_or_store():
    catalog = MagicMock(spec=EventCatalog)
    store = MagicMock()
    service = ItineraryService(catalog=catalog, store=store, assembler=MagicMock())

    with pytest.raises(InvalidRangeError):
        service.create_itinerary(_trip("Sunday", "Thursday"))

    catalog.get_event.assert_not_called()
    store.put.assert_not_called()


def test_validation_reports_every_problem():
    result = validate_trip(_trip("Sunday", "Friday", ("food", "karaoke"), group_size=0))
    assert not result
    assert len(result.errors) == 3


def test_unknown_event(melbourne_service, memory_store):
    with pytest.raises(UnknownEventError, match="monaco-2026"):
        melbourne_service.create_itinerary(_trip(slug="monaco-2026"))
    assert len(memory_store) == 0


def test_catalog_outage_propagates_without_write(memory_store, stub_assembler):
    catalog = MagicMock(spec=EventCatalog)
    catalog.get_event.return_value = StubEventCatalog().get_event("melbourne-2026")
    catalog.get_sessions_for_event.side_effect = CatalogUnavailableError("db down")
    service = ItineraryService(catalog=catalog, store=memory_store, assembler=stub_assembler)

    with pytest.raises(CatalogUnavailableError) as exc_info:
        service.create_itinerary(_trip())
    assert exc_info.value.retryable
    assert len(memory_store) == 0


def test_storage_failure_propagates(stub_assembler):
    store = MagicMock()
    store.put.side_effect = StorageError("redis down")
    service = ItineraryService(catalog=StubEventCatalog(), store=store, assembler=stub_assembler)
    with pytest.raises(StorageError):
        service.create_itinerary(_trip())


def test_invalid_catalog_experiences_are_dropped(memory_store, stub_assembler):
    base = StubEventCatalog()
    event = base.get_event("melbourne-2026")
    catalog = StubEventCatalog(
        events=[event],
        sessions={event.event_id: base.get_sessions_for_event(event.event_id)},
        experiences={event.event_id: [
            make_experience(1, "food", 0.0, rating=5.0, featured=True, title="Broken"),
            make_experience(2, "karaoke", 1.0, rating=5.0, featured=True, title="Unknown"),
            make_experience(3, "food", 1.0, title="Good"),
        ]},
    )
    service = ItineraryService(catalog=catalog, store=memory_store, assembler=stub_assembler)
    itinerary = service.get_itinerary(service.create_itinerary(_trip(interests=())))

    titles = [s.title for d in itinerary.days for s in d.slots if isinstance(s, ExperienceSlot)]
    assert titles == ["Good"]


def test_slow_narrative_still_creates_itinerary(memory_store):
    assembler = ItineraryAssembler(NarrativeGenerator(client=SlowTextGenerator(delay=1.0), timeout_seconds=0.1))
    service = ItineraryService(catalog=StubEventCatalog(), store=memory_store, assembler=assembler)

    itinerary = service.get_itinerary(service.create_itinerary(_trip()))
    assert itinerary.generation_model == "fallback"
    assert itinerary.summary.startswith("4-day Australian Grand Prix plan featuring")


def test_injected_empty_store_is_used(memory_store, stub_assembler):
    catalog = StubEventCatalog()
    service = ItineraryService(catalog=catalog, store=memory_store, assembler=stub_assembler)
    assert service.store is memory_store
    assert service.catalog is catalog
    assert service.assembler is stub_assembler


def test_undated_event_is_a_catalog_error(memory_store):
    undated = RaceEvent(event_id=99, slug="tbc-2026", name="TBC Grand Prix", city="Nowhere")
    assembler = MagicMock()
    service = ItineraryService(
        catalog=StubEventCatalog(events=[undated]), store=memory_store, assembler=assembler
    )

    with pytest.raises(CatalogUnavailableError, match="no race date"):
        service.create_itinerary(_trip("Friday", "Sunday", slug="tbc-2026"))
    assembler.assemble.assert_not_called()
    assert len(memory_store) == 0


def test_selected_sessions_only(melbourne_service):
    itinerary_id = melbourne_service.create_itinerary(_trip(session_ids=frozenset({4, 5})))
    itinerary = melbourne_service.get_itinerary(itinerary_id)

    placed = [s.short_name for d in itinerary.days for s in d.slots if isinstance(s, SessionSlot)]
    assert placed == ["Q", "Race"]


def test_unknown_session_id_is_rejected(melbourne_service, memory_store):
    with pytest.raises(InvalidRangeError, match="42"):
        melbourne_service.create_itinerary(_trip(session_ids=frozenset({1, 42})))
    assert len(memory_store) == 0
