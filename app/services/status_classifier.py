# app/services/status_classifier.py
"""
Occupancy → status tier.
  < 50%  safe
  < 80%  busy
  else   crowded
Always computed from raw occupancy/capacity; a stored status is never trusted.
"""

SAFE = "safe"
BUSY = "busy"
CROWDED = "crowded"

SAFE_BELOW_PERCENT = 50
BUSY_BELOW_PERCENT = 80


def occupancy_percent(occupancy: int, capacity: int) -> float:
    if capacity <= 0:
        return 100.0
    return occupancy / capacity * 100


def classify(occupancy: int, capacity: int) -> str:
    percent = occupancy_percent(occupancy, capacity)
    if percent < SAFE_BELOW_PERCENT:
        return SAFE
    if percent < BUSY_BELOW_PERCENT:
        return BUSY
    return CROWDED
