# app/services/location_registry.py
"""
Location Registry — canonical occupancy/capacity records plus a push channel.

Reads return immutable LocationView snapshots with status recomputed on every read.
Writers commit first, then call broadcast(db) so every subscriber receives the
full current snapshot. Subscribers hold a scoped Subscription:

    async with subscribe(db) as subscription:
        async for snapshot in subscription:
            ...

The first item is always the current snapshot, so a subscription can be
dropped and re-opened at any time. A slow subscriber only ever sees the
latest snapshot (intermediate ones are replaced, not queued).
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import NotFound
from app.models.location import Location
from app.services.status_classifier import classify, occupancy_percent
from app.utils.qr_payload import generate_token
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LOCATIONS = [
    {"id": "main-canteen", "name": "Main Canteen", "type": "canteen",
     "current_occupancy": 78, "max_capacity": 100, "avg_wait_time": 12, "position": (30, 40)},
    {"id": "central-library", "name": "Central Library", "type": "library",
     "current_occupancy": 45, "max_capacity": 150, "avg_wait_time": 5, "position": (60, 25)},
    {"id": "admin-office", "name": "Admin Office", "type": "office",
     "current_occupancy": 92, "max_capacity": 100, "avg_wait_time": 25, "position": (45, 65)},
    {"id": "library-cafe", "name": "Library Cafe", "type": "cafe",
     "current_occupancy": 15, "max_capacity": 50, "avg_wait_time": 2, "position": (75, 50)},
    {"id": "science-cafeteria", "name": "Science Block Cafeteria", "type": "canteen",
     "current_occupancy": 65, "max_capacity": 80, "avg_wait_time": 8, "position": (20, 70)},
]


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class LocationView:
    id: str
    name: str
    type: str
    current_occupancy: int
    max_capacity: int
    avg_wait_time: int
    position: Position
    updated_at: Optional[datetime] = None

    @property
    def occupancy_percent(self) -> float:
        return round(occupancy_percent(self.current_occupancy, self.max_capacity), 1)

    @property
    def status(self) -> str:
        return classify(self.current_occupancy, self.max_capacity)


def to_view(location: Location) -> LocationView:
    return LocationView(
        id=location.id,
        name=location.name,
        type=location.type,
        current_occupancy=location.current_occupancy,
        max_capacity=location.max_capacity,
        avg_wait_time=location.avg_wait_time,
        position=Position(x=location.position_x, y=location.position_y),
        updated_at=location.updated_at,
    )


def list_locations(db: Session) -> list[Location]:
    return db.query(Location).order_by(Location.name).all()


def get_location(db: Session, location_id: str) -> Location:
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        raise NotFound(f"Location '{location_id}' not found")
    return location


def snapshot(db: Session) -> tuple[LocationView, ...]:
    return tuple(to_view(loc) for loc in list_locations(db))


def seed_defaults(db: Session) -> int:
    """Insert the default campus locations if the table is empty. Returns rows added."""
    if db.query(Location).count() > 0:
        return 0

    now = datetime.utcnow()
    for data in DEFAULT_LOCATIONS:
        x, y = data["position"]
        db.add(Location(
            id=data["id"],
            name=data["name"],
            type=data["type"],
            current_occupancy=data["current_occupancy"],
            max_capacity=data["max_capacity"],
            avg_wait_time=data["avg_wait_time"],
            position_x=x,
            position_y=y,
            entry_qr_code=generate_token(),
            created_at=now,
            updated_at=now,
        ))
    db.commit()
    logger.info(f"[REGISTRY] Seeded {len(DEFAULT_LOCATIONS)} default locations")
    return len(DEFAULT_LOCATIONS)


def adjust_occupancy(db: Session, location_id: str, delta: int) -> bool:
    """
    Atomic counter change: UPDATE locations SET current_occupancy = current_occupancy + :delta.
    A decrement that would take the counter below zero matches no row and is skipped.
    Returns True when a row was updated. Caller commits.
    """
    q = db.query(Location).filter(Location.id == location_id)
    if delta < 0:
        q = q.filter(Location.current_occupancy >= -delta)
    updated = q.update(
        {
            Location.current_occupancy: Location.current_occupancy + delta,
            Location.updated_at: datetime.utcnow(),
        },
        synchronize_session=False,
    )
    return bool(updated)


# ── Push channel ─────────────────────────────────────────────────────────────

class Subscription:
    """One subscriber's view of the channel. Async-iterable, never ends on its own."""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    def offer(self, snapshot: tuple[LocationView, ...]):
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(snapshot)

    def __aiter__(self):
        return self

    async def __anext__(self) -> tuple[LocationView, ...]:
        return await self._queue.get()


class LocationChannel:
    def __init__(self):
        self._subscribers: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @asynccontextmanager
    async def subscribe(self, initial: tuple[LocationView, ...] = ()):
        subscription = Subscription()
        subscription.offer(initial)
        self._subscribers.add(subscription)
        logger.debug(f"[REGISTRY] Subscriber added ({len(self._subscribers)} active)")
        try:
            yield subscription
        finally:
            self._subscribers.discard(subscription)
            logger.debug(f"[REGISTRY] Subscriber removed ({len(self._subscribers)} active)")

    def publish(self, snapshot: tuple[LocationView, ...]):
        for subscription in list(self._subscribers):
            subscription.offer(snapshot)


location_channel = LocationChannel()


def broadcast(db: Session, channel: Optional[LocationChannel] = None):
    """Push a fresh snapshot to every subscriber. Call after a committed write."""
    channel = channel or location_channel
    if not channel.subscriber_count:
        return
    try:
        current = snapshot(db)
    except SQLAlchemyError as e:
        logger.error(f"[REGISTRY] Snapshot for broadcast failed: {e}", exc_info=True)
        return
    channel.publish(current)


@asynccontextmanager
async def subscribe(db: Session, channel: Optional[LocationChannel] = None):
    """
    Open a scoped subscription. Seeds the default locations when the table is empty.
    If the store cannot be read the subscription starts from an empty snapshot.
    """
    channel = channel or location_channel
    try:
        seed_defaults(db)
        initial = snapshot(db)
    except SQLAlchemyError as e:
        logger.error(f"[REGISTRY] Initial snapshot failed, starting empty: {e}", exc_info=True)
        initial = ()
    finally:
        # the stream outlives the read; no transaction may stay open
        db.rollback()

    async with channel.subscribe(initial) as subscription:
        yield subscription
