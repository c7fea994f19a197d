from datetime import date, time

import pytest

from racetrip import config
from racetrip.errors import InvalidRangeError
from racetrip.modules.planning.time_grid import build_time_grid, day_span, event_dates
from racetrip.modules.tool_usage.catalog_tool import StubEventCatalog
from racetrip.schemas.itinerary import TimeInterval

from conftest import make_session

RACE_DATE = date(2026, 3, 8)


def test_day_span_is_inclusive():
    assert day_span("Thursday", "Sunday") == ["Thursday", "Friday", "Saturday", "Sunday"]
    assert day_span("Saturday", "Saturday") == ["Saturday"]


def test_reversed_range_raises():
    with pytest.raises(InvalidRangeError, match="after departure"):
        day_span("Sunday", "Friday")


def test_unknown_day_label_raises():
    with pytest.raises(InvalidRangeError, match="Unknown day"):
        build_time_grid("Funday", "Sunday", RACE_DATE, [])


def test_event_dates_anchor_on_sunday():
    dates = event_dates(RACE_DATE)
    assert dates["Sunday"] == RACE_DATE
    assert dates["Wednesday"] == date(2026, 3, 4)
    assert dates["Tuesday"] == date(2026, 3, 10)


def test_grid_days_and_boundary_windows():
    grid = build_time_grid("Thursday", "Sunday", RACE_DATE, [])

    assert [d.weekday for d in grid] == ["Thursday", "Friday", "Saturday", "Sunday"]
    assert [d.date for d in grid] == [date(2026, 3, d) for d in (5, 6, 7, 8)]
    assert grid[0].window == TimeInterval(time(12, 0), time(22, 0))
    assert grid[1].window == TimeInterval(time(8, 0), time(22, 0))
    assert grid[2].window == TimeInterval(time(8, 0), time(22, 0))
    assert grid[3].window == TimeInterval(time(8, 0), time(18, 0))


def test_same_day_trip_uses_arrival_and_departure_times():
    (day,) = build_time_grid("Saturday", "Saturday", RACE_DATE, [])
    assert day.window == TimeInterval(time(12, 0), time(18, 0))


def test_sessions_grouped_and_sorted_per_day():
    catalog = StubEventCatalog()
    sessions = catalog.get_sessions_for_event(1)
    grid = build_time_grid("Thursday", "Sunday", RACE_DATE, list(reversed(sessions)))

    by_day = {d.weekday: d for d in grid}
    assert by_day["Thursday"].sessions == ()
    assert [s.short_name for s in by_day["Friday"].sessions] == ["FP1", "FP2"]
    assert [s.short_name for s in by_day["Saturday"].sessions] == ["FP3", "Q"]
    assert [s.short_name for s in by_day["Sunday"].sessions] == ["Race"]


def test_sessions_outside_trip_days_are_ignored():
    sessions = [make_session(1, "Friday", (12, 0), (13, 0)), make_session(2, "Sunday", (15, 0), (17, 0))]
    grid = build_time_grid("Saturday", "Sunday", RACE_DATE, sessions)
    assert [s.session_id for d in grid for s in d.sessions] == [2]


def test_session_before_arrival_is_dropped():
    sessions = [
        make_session(1, "Friday", (9, 0), (10, 0)),
        make_session(2, "Friday", (10, 0), (12, 0)),
        make_session(3, "Friday", (14, 0), (15, 0)),
    ]
    day = build_time_grid("Friday", "Saturday", RACE_DATE, sessions)[0]
    assert [s.session_id for s in day.sessions] == [3]
    assert day.window.start == time(12, 0)


def test_straddling_session_widens_window():
    sessions = [make_session(1, "Friday", (11, 0), (13, 0))]
    day = build_time_grid("Friday", "Saturday", RACE_DATE, sessions)[0]
    assert day.window == TimeInterval(time(11, 0), time(22, 0))
    assert day.sessions == tuple(sessions)


def test_departure_time_is_configurable(monkeypatch):
    monkeypatch.setattr(config, "DEPARTURE_TIME", "16:00")
    sessions = [make_session(5, "Sunday", (15, 0), (17, 0), kind="race")]
    day = build_time_grid("Saturday", "Sunday", RACE_DATE, sessions)[-1]
    assert day.window == TimeInterval(time(8, 0), time(17, 0))


def test_only_selected_sessions_are_kept():
    sessions = StubEventCatalog().get_sessions_for_event(1)
    grid = build_time_grid("Friday", "Sunday", RACE_DATE, sessions, session_ids=frozenset({2, 5}))
    assert [[s.short_name for s in d.sessions] for d in grid] == [["FP2"], [], ["Race"]]


def test_empty_selection_keeps_no_sessions():
    sessions = StubEventCatalog().get_sessions_for_event(1)
    grid = build_time_grid("Friday", "Sunday", RACE_DATE, sessions, session_ids=frozenset())
    assert all(d.sessions == () for d in grid)


def test_overlapping_session_does_not_widen_window():
    sessions = [
        make_session(1, "Saturday", (20, 0), (21, 30), name="Support Race"),
        make_session(2, "Saturday", (21, 0), (23, 30), name="Late Parade"),
    ]
    day = build_time_grid("Friday", "Sunday", RACE_DATE, sessions)[1]
    assert day.window == TimeInterval(time(8, 0), time(22, 0))
    assert [s.session_id for s in day.sessions] == [1]
