# app/services/demo_simulator.py
"""
Demo mode — random-walk occupancy so the dashboard moves during presentations.

Every DEMO_INTERVAL_SECONDS, for each location:
  - occupancy += random delta in [-DEMO_MAX_DELTA, DEMO_MAX_DELTA),
    clamped into [min(DEMO_MIN_OCCUPANCY, capacity), capacity - 2]
    and written as an atomic delta (never an absolute overwrite)
  - avg_wait_time = max(1, round(occupancy_ratio * 30))
then one snapshot is broadcast.

Purely cosmetic. Runs only between start() and stop().
"""

import asyncio
import random
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.database import SessionLocal
from app.models.location import Location
from app.services.location_registry import adjust_occupancy, broadcast
from app.utils.logger import get_logger

logger = get_logger(__name__)

_MAX_WAIT_MINUTES = 30
_HEADROOM = 2


def occupancy_bounds(capacity: int) -> tuple[int, int]:
    lower = min(settings.DEMO_MIN_OCCUPANCY, capacity)
    upper = max(lower, capacity - _HEADROOM)
    return lower, upper


def wait_time_for(occupancy: int, capacity: int) -> int:
    ratio = occupancy / capacity if capacity > 0 else 1
    return max(1, round(ratio * _MAX_WAIT_MINUTES))


class DemoSimulator:
    def __init__(self, session_factory=SessionLocal, interval: Optional[float] = None,
                 rng: Optional[random.Random] = None):
        self._session_factory = session_factory
        self._interval = interval if interval is not None else settings.DEMO_INTERVAL_SECONDS
        self._rng = rng or random.Random()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="demo-simulator")
        logger.info(f"[DEMO] Simulator started (every {self._interval}s)")

    async def stop(self):
        if not self.running:
            self._task = None
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("[DEMO] Simulator stopped")

    async def _run(self):
        while True:
            db = self._session_factory()
            try:
                await self.tick(db)
            except Exception as e:
                db.rollback()
                logger.error(f"[DEMO] Tick failed: {e}", exc_info=True)
            finally:
                db.close()
            await asyncio.sleep(self._interval)

    async def tick(self, db: Session) -> int:
        """Move every location one step. Returns the number of locations touched."""
        locations = db.query(Location).all()
        now = datetime.utcnow()
        for loc in locations:
            observed = loc.current_occupancy
            lower, upper = occupancy_bounds(loc.max_capacity)
            delta = self._rng.randrange(-settings.DEMO_MAX_DELTA, settings.DEMO_MAX_DELTA)
            target = max(lower, min(upper, observed + delta))

            if target != observed:
                adjust_occupancy(db, loc.id, target - observed)
            db.query(Location).filter(Location.id == loc.id).update(
                {
                    Location.avg_wait_time: wait_time_for(target, loc.max_capacity),
                    Location.updated_at: now,
                },
                synchronize_session=False,
            )
        db.commit()
        logger.debug(f"[DEMO] Tick moved {len(locations)} locations")

        broadcast(db)
        return len(locations)


demo_simulator = DemoSimulator()
