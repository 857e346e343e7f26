# app/services/suggestion_service.py
"""
"Go here instead" suggestions.

score(loc) = ((100 - occupancy%) + (30 - avg_wait)) / 2
best  = highest score
worst = highest occupancy%
Suggest best only when worst.avg_wait - best.avg_wait > SUGGESTION_MIN_TIME_SAVED.

Works on whatever snapshot it is handed; nothing is cached between calls.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
from app.config import settings
from app.services.location_registry import LocationView
from app.services.status_classifier import SAFE, classify, occupancy_percent


@dataclass(frozen=True)
class Suggestion:
    message: str
    location: LocationView
    time_saved: int


def score(location: LocationView) -> float:
    percent = occupancy_percent(location.current_occupancy, location.max_capacity)
    return ((100 - percent) + (30 - location.avg_wait_time)) / 2


def suggest(
    locations: Sequence[LocationView],
    exclude_location_id: Optional[str] = None,
) -> Optional[Suggestion]:
    candidates = [loc for loc in locations if loc.id != exclude_location_id]
    if len(candidates) < 2:
        return None

    # max() keeps the first of equal candidates, matching a strict ">" reduce
    best = max(candidates, key=score)
    worst = max(candidates, key=lambda loc: occupancy_percent(loc.current_occupancy, loc.max_capacity))

    # never point people at a place that is as full as the fullest one
    if occupancy_percent(best.current_occupancy, best.max_capacity) >= \
            occupancy_percent(worst.current_occupancy, worst.max_capacity):
        return None

    time_saved = worst.avg_wait_time - best.avg_wait_time
    if time_saved <= settings.SUGGESTION_MIN_TIME_SAVED:
        return None

    state = "empty" if classify(best.current_occupancy, best.max_capacity) == SAFE else "less crowded"
    return Suggestion(
        message=f"{best.name} is currently {state}. Head there to save {time_saved} mins!",
        location=best,
        time_saved=time_saved,
    )
