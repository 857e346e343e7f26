"""Live location occupancy — snapshot reads, suggestion, WebSocket push stream."""

import asyncio
from typing import Optional
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session
from app.auth.dependencies import get_current_user_optional
from app.database import get_db
from app.schemas.auth import AuthUser
from app.schemas.location import LocationOut, SuggestionOut
from app.services import location_registry
from app.services.location_registry import to_view
from app.services.profile_service import get_profile
from app.services.suggestion_service import suggest
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/locations", response_model=list[LocationOut])
def get_all_locations(db: Session = Depends(get_db)):
    """Current snapshot of every location, status freshly computed."""
    return [LocationOut.model_validate(view) for view in location_registry.snapshot(db)]


@router.get("/locations/{location_id}", response_model=LocationOut)
def get_location(location_id: str, db: Session = Depends(get_db)):
    return LocationOut.model_validate(to_view(location_registry.get_location(db, location_id)))


@router.get("/suggestion", response_model=Optional[SuggestionOut],
            summary="Best alternative location right now")
def get_suggestion(
    exclude: Optional[str] = None,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """
    Returns null when no location saves more than a few minutes.
    A signed-in user's current location is never suggested.
    """
    if exclude is None and user is not None:
        exclude = get_profile(db, user.uid).current_location_id
    suggestion = suggest(location_registry.snapshot(db), exclude_location_id=exclude)
    return SuggestionOut.model_validate(suggestion) if suggestion else None


async def _wait_for_disconnect(websocket: WebSocket):
    """Drain client frames until the disconnect message arrives."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws/locations")
async def stream_locations(websocket: WebSocket, db: Session = Depends(get_db)):
    """
    Sends the full location list on connect and again after every change.
    The subscription is released as soon as the client goes away, even when
    nothing is being published.
    """
    await websocket.accept()
    disconnected = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        async with location_registry.subscribe(db) as subscription:
            while True:
                next_snapshot = asyncio.ensure_future(anext(subscription))
                done, _ = await asyncio.wait(
                    {disconnected, next_snapshot}, return_when=asyncio.FIRST_COMPLETED
                )
                if disconnected in done:
                    next_snapshot.cancel()
                    break
                await websocket.send_json(
                    [LocationOut.model_validate(view).model_dump(mode="json")
                     for view in next_snapshot.result()]
                )
    except (WebSocketDisconnect, RuntimeError) as e:
        # send raced the close
        logger.debug(f"Location stream send failed after close: {e}")
    finally:
        disconnected.cancel()
    logger.debug("Location stream client disconnected")
