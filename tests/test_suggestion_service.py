"""Unit tests for the suggestion engine."""

import random

from app.services.location_registry import LocationView, Position
from app.services.status_classifier import occupancy_percent
from app.services.suggestion_service import score, suggest


def view(location_id, occupancy, capacity, wait, name=None):
    return LocationView(
        id=location_id,
        name=name or location_id,
        type="canteen",
        current_occupancy=occupancy,
        max_capacity=capacity,
        avg_wait_time=wait,
        position=Position(x=50, y=50),
    )


class TestSuggest:
    def test_quiet_location_suggested(self):
        quiet = view("cafe", 10, 100, 2, name="Library Cafe")
        packed = view("office", 95, 100, 25, name="Admin Office")

        result = suggest([quiet, packed])

        assert result is not None
        assert result.location.id == "cafe"
        assert result.time_saved == 23
        assert "Library Cafe" in result.message
        assert "empty" in result.message
        assert "save 23 mins" in result.message

    def test_less_crowded_wording_when_best_is_busy(self):
        busy = view("a", 60, 100, 3)
        packed = view("b", 99, 100, 20)
        assert "less crowded" in suggest([busy, packed]).message

    def test_small_gap_suppressed(self):
        assert suggest([view("a", 10, 100, 8), view("b", 90, 100, 10)]) is None

    def test_gap_of_exactly_threshold_suppressed(self):
        assert suggest([view("a", 10, 100, 5), view("b", 90, 100, 10)]) is None
        assert suggest([view("a", 10, 100, 4), view("b", 90, 100, 10)]) is not None

    def test_single_location_gives_nothing(self):
        assert suggest([view("a", 10, 100, 2)]) is None
        assert suggest([]) is None

    def test_excluded_location_never_suggested(self):
        here = view("here", 0, 100, 0)
        other = view("other", 20, 100, 3)
        packed = view("packed", 95, 100, 25)

        result = suggest([here, other, packed], exclude_location_id="here")

        assert result.location.id == "other"
        assert result.time_saved == 22

    def test_score(self):
        assert score(view("a", 10, 100, 2)) == 59
        assert score(view("b", 95, 100, 25)) == 5

    def test_randomised_sets_never_suggest_the_fullest(self):
        rng = random.Random(1234)
        for _ in range(500):
            locations = []
            for i in range(rng.randint(2, 8)):
                capacity = rng.randint(1, 200)
                locations.append(view(f"loc-{i}", rng.randint(0, capacity), capacity, rng.randint(0, 40)))

            result = suggest(locations)
            fullest = max(occupancy_percent(l.current_occupancy, l.max_capacity) for l in locations)
            best = min(l.avg_wait_time for l in locations)
            worst_wait = max(l.avg_wait_time for l in locations)

            if result is None:
                continue
            assert occupancy_percent(result.location.current_occupancy, result.location.max_capacity) < fullest
            assert result.time_saved > 5
            assert result.time_saved <= worst_wait - best
