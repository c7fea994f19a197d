"""Shared fixtures: a small race weekend, fake LLM clients, stores."""

import os
import tempfile
import time as _time
from datetime import date, time

# Keep JSONL event logs and LLM calls out of the developer's environment.
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="racetrip-logs-"))
os.environ.setdefault("USE_STUB_LLM", "true")

import pytest  # noqa: E402

from racetrip.db.itinerary_store import InMemoryItineraryStore  # noqa: E402
from racetrip.itinerary_service import ItineraryService  # noqa: E402
from racetrip.llm import StubTextGenerator  # noqa: E402
from racetrip.modules.narrative.narrative_generator import NarrativeGenerator  # noqa: E402
from racetrip.modules.planning.itinerary_assembler import ItineraryAssembler  # noqa: E402
from racetrip.modules.tool_usage.catalog_tool import StubEventCatalog  # noqa: E402
from racetrip.schemas.catalog import Experience, FixedSession, RaceEvent  # noqa: E402
from racetrip.schemas.itinerary import FreeSlot, ItineraryDay, TimeInterval, t2m  # noqa: E402


class JsonTextGenerator:
    model_id = "fake:json"

    def __init__(self, title="Four Days of Speed", summary="Practice, food and a Grand Prix."):
        self.title = title
        self.summary = summary
        self.calls = []

    def generate(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        return f'{{"title": "{self.title}", "summary": "{self.summary}"}}'


class FailingTextGenerator:
    model_id = "fake:failing"

    def generate(self, system_prompt, user_prompt):
        raise ConnectionError("provider down")


class SlowTextGenerator:
    model_id = "fake:slow"

    def __init__(self, delay=1.0):
        self.delay = delay

    def generate(self, system_prompt, user_prompt):
        _time.sleep(self.delay)
        return '{"title": "Too late", "summary": "Never used."}'


class RawTextGenerator:
    model_id = "fake:raw"

    def __init__(self, reply):
        self.reply = reply

    def generate(self, system_prompt, user_prompt):
        return self.reply


def make_session(sid, day, start, end, name=None, kind="practice"):
    return FixedSession(
        session_id=sid,
        name=name or f"Session {sid}",
        day_of_week=day,
        start_time=time(*start),
        end_time=time(*end),
        session_type=kind,
    )


def make_experience(eid, category, hours, rating=4.5, featured=False, title=None):
    return Experience(
        experience_id=eid,
        title=title or f"{category.title()} experience {eid}",
        category=category,
        duration_hours=hours,
        rating=rating,
        is_featured=featured,
    )


def assert_tiles(day: ItineraryDay, window: TimeInterval) -> None:
    """Slots are ordered, non-empty, gap-free and cover ``window`` exactly."""
    if window.minutes == 0:
        assert day.slots == ()
        return
    assert day.slots, f"{day.day_label} has no slots"
    assert day.slots[0].start == window.start
    assert day.slots[-1].end == window.end
    for slot in day.slots:
        assert t2m(slot.start) < t2m(slot.end), slot
    for prev, nxt in zip(day.slots, day.slots[1:]):
        assert prev.end == nxt.start, (prev, nxt)


@pytest.fixture
def event():
    return RaceEvent(
        event_id=7,
        slug="testville-2026",
        name="Testville Grand Prix",
        city="Testville",
        country="Testland",
        timezone="UTC",
        race_date=date(2026, 3, 8),
    )


@pytest.fixture
def saturday_only_sessions():
    return [make_session(1, "Saturday", (9, 0), (11, 0), name="Qualifying", kind="qualifying")]


@pytest.fixture
def food_experiences():
    return [
        make_experience(10, "food", 1.0, rating=4.9, title="Coffee Walk"),
        make_experience(11, "food", 2.5, rating=4.7, featured=True, title="Market Tasting"),
        make_experience(12, "food", 3.0, rating=4.6, title="Street Food Night"),
        make_experience(13, "food", 8.0, rating=4.7, title="Wine Valley Day"),
    ]


@pytest.fixture
def stub_assembler():
    return ItineraryAssembler(NarrativeGenerator(client=StubTextGenerator(), timeout_seconds=1.0))


@pytest.fixture
def memory_store():
    return InMemoryItineraryStore()


@pytest.fixture
def melbourne_service(memory_store, stub_assembler):
    return ItineraryService(catalog=StubEventCatalog(), store=memory_store, assembler=stub_assembler)


@pytest.fixture
def free_slot():
    return FreeSlot(start=time(8, 0), end=time(9, 0), note="open")
