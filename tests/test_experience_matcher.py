from datetime import time

from racetrip.modules.planning.experience_matcher import (
    ExperiencePool,
    rank_candidates,
    select_experience,
)
from racetrip.schemas.itinerary import TimeInterval

from conftest import make_experience

TWO_HOURS = TimeInterval(time(10, 0), time(12, 0))


def test_duration_minutes_rounds_fractional_hours():
    assert make_experience(1, "food", 2.5).duration_minutes == 150
    assert make_experience(2, "food", 1.25).duration_minutes == 75
    assert make_experience(3, "food", 0.1).duration_minutes == 6


def test_interest_match_beats_higher_ranked_other_category():
    culture = make_experience(1, "culture", 1.0, rating=5.0, featured=True)
    food = make_experience(2, "food", 1.0, rating=4.0)
    result = select_experience(TWO_HOURS, {"food"}, ExperiencePool.from_catalog([culture, food]))
    assert result.experience is food


def test_falls_back_to_any_category_when_no_interest_fits():
    long_food = make_experience(1, "food", 3.0)
    culture = make_experience(2, "culture", 1.5)
    result = select_experience(TWO_HOURS, {"food"}, ExperiencePool.from_catalog([long_food, culture]))
    assert result.experience is culture


def test_empty_interests_accept_every_category():
    a = make_experience(1, "nightlife", 1.0, rating=4.2)
    b = make_experience(2, "adventure", 1.0, rating=4.8)
    result = select_experience(TWO_HOURS, set(), ExperiencePool.from_catalog([a, b]))
    assert result.experience is b


def test_ranking_order():
    featured = make_experience(5, "food", 1.0, rating=4.0, featured=True)
    top_rated = make_experience(4, "food", 1.0, rating=4.9)
    longer = make_experience(3, "food", 1.5, rating=4.5)
    shorter_high_id = make_experience(2, "food", 1.0, rating=4.5)
    shorter_low_id = make_experience(1, "food", 1.0, rating=4.5)

    ranked = rank_candidates(
        TWO_HOURS, {"food"}, [shorter_high_id, longer, top_rated, shorter_low_id, featured]
    )
    assert [e.experience_id for e in ranked] == [5, 4, 3, 1, 2]


def test_exact_fit_is_accepted_and_overlong_rejected():
    exact = make_experience(1, "food", 2.0)
    too_long = make_experience(2, "food", 2.05)
    ranked = rank_candidates(TWO_HOURS, {"food"}, [too_long, exact])
    assert ranked == [exact]


def test_zero_duration_never_fits():
    assert rank_candidates(TWO_HOURS, set(), [make_experience(1, "food", 0.0)]) == []


def test_no_fit_returns_none_and_same_pool():
    pool = ExperiencePool.from_catalog([make_experience(1, "daytrip", 8.0)])
    result = select_experience(TWO_HOURS, {"daytrip"}, pool)
    assert result.experience is None
    assert result.pool is pool


def test_selected_experience_is_consumed_without_mutating_input():
    coffee = make_experience(1, "food", 1.0, rating=4.9)
    market = make_experience(2, "food", 1.0, rating=4.5)
    catalog = [coffee, market]
    pool = ExperiencePool.from_catalog(catalog)

    first = select_experience(TWO_HOURS, {"food"}, pool)
    second = select_experience(TWO_HOURS, {"food"}, first.pool)
    third = select_experience(TWO_HOURS, {"food"}, second.pool)

    assert first.experience is coffee
    assert second.experience is market
    assert third.experience is None
    assert pool.consumed == frozenset()
    assert catalog == [coffee, market]
    assert second.pool.consumed == {1, 2}
