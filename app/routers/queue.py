"""Virtual queue — join, list and cancel tickets."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth.dependencies import get_current_user, get_current_user_optional
from app.database import get_db
from app.schemas.auth import AuthUser
from app.schemas.ticket import TicketOut
from app.services import queue_service

router = APIRouter()


@router.post("/queue/{location_id}/join", response_model=TicketOut, status_code=201,
             summary="Join a location's virtual queue")
async def join_queue(
    location_id: str,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """position_in_line is an estimate from current occupancy, not a strict FIFO index."""
    return await queue_service.join_queue(db, user, location_id)


@router.get("/tickets", response_model=list[TicketOut])
def get_my_tickets(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    return queue_service.list_tickets(db, user)


@router.delete("/tickets/{ticket_id}", summary="Cancel a ticket (idempotent)")
async def cancel_ticket(
    ticket_id: str,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    removed = await queue_service.cancel_ticket(db, user, ticket_id)
    return {"ticket_id": ticket_id, "status": "cancelled" if removed else "not_found"}
