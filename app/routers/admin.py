"""
Admin endpoints — location CRUD, entry QR codes, dashboard stats, demo mode.
All require an admins row with role 'admin' for the caller's email.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth.dependencies import verify_admin_access
from app.database import get_db
from app.schemas.admin import DashboardStatsOut, DemoToggle, QRCodeOut
from app.schemas.location import LocationCreate, LocationOut, LocationUpdate
from app.services import admin_service
from app.services.demo_simulator import demo_simulator
from app.services.location_registry import to_view

router = APIRouter(dependencies=[Depends(verify_admin_access)])


@router.get("/admin/stats", response_model=DashboardStatsOut)
def get_dashboard_stats(db: Session = Depends(get_db)):
    return admin_service.dashboard_stats(db)


@router.post("/admin/locations", response_model=LocationOut, status_code=201,
             summary="Create a location with a fresh entry QR token")
async def create_location(body: LocationCreate, db: Session = Depends(get_db)):
    return LocationOut.model_validate(to_view(await admin_service.create_location(db, body)))


@router.put("/admin/locations/{location_id}", response_model=LocationOut)
async def update_location(location_id: str, body: LocationUpdate, db: Session = Depends(get_db)):
    return LocationOut.model_validate(to_view(await admin_service.update_location(db, location_id, body)))


@router.delete("/admin/locations/{location_id}",
               summary="Delete a location, voiding its tickets and closing its check-ins")
async def delete_location(location_id: str, db: Session = Depends(get_db)):
    await admin_service.delete_location(db, location_id)
    return {"location_id": location_id, "status": "deleted"}


@router.post("/admin/locations/{location_id}/rotate-qr", response_model=QRCodeOut,
             summary="Issue a new entry token (old printed codes stop working)")
async def rotate_qr(location_id: str, db: Session = Depends(get_db)):
    await admin_service.rotate_qr_code(db, location_id)
    return next(qr for qr in admin_service.qr_codes(db) if qr["location_id"] == location_id)


@router.get("/admin/qr-codes", response_model=list[QRCodeOut])
def list_qr_codes(db: Session = Depends(get_db)):
    """Entry QR payload per location, ready to be rendered and printed."""
    return admin_service.qr_codes(db)


@router.get("/admin/demo", response_model=DemoToggle)
def get_demo_mode():
    return {"enabled": demo_simulator.running}


@router.put("/admin/demo", response_model=DemoToggle, summary="Start/stop the occupancy simulator")
async def set_demo_mode(body: DemoToggle):
    if body.enabled:
        demo_simulator.start()
    else:
        await demo_simulator.stop()
    return {"enabled": demo_simulator.running}
