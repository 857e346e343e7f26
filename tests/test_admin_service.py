"""Unit tests for admin provisioning."""

import pytest
from conftest import add_location
from app.errors import NotFound
from app.models.admin import Admin
from app.models.checkin import Checkin
from app.models.location import Location
from app.models.ticket import Ticket
from app.models.user_profile import UserProfile
from app.schemas.location import LocationCreate, LocationUpdate
from app.services import admin_service
from app.services.checkin_service import check_in
from app.services.queue_service import join_queue
from app.schemas.auth import AuthUser


class TestLocations:
    @pytest.mark.asyncio
    async def test_create_starts_empty_with_token(self, db):
        loc = await admin_service.create_location(
            db, LocationCreate(name="Gym Cafe", type="cafe", max_capacity=40, position_x=10, position_y=90)
        )

        assert loc.current_occupancy == 0
        assert loc.avg_wait_time == 5
        assert loc.entry_qr_code.startswith("smartqueue-")
        assert loc.position_y == 90

    @pytest.mark.asyncio
    async def test_created_locations_get_independent_tokens(self, db):
        a = await admin_service.create_location(db, LocationCreate(name="A"))
        b = await admin_service.create_location(db, LocationCreate(name="B"))
        assert a.id != b.id
        assert a.entry_qr_code != b.entry_qr_code

    @pytest.mark.asyncio
    async def test_update_keeps_occupancy_and_token(self, db):
        add_location(db, "loc-1", occupancy=33, token="keep-me")

        loc = await admin_service.update_location(db, "loc-1", LocationUpdate(name="Renamed", max_capacity=60))

        assert loc.name == "Renamed"
        assert loc.max_capacity == 60
        assert loc.current_occupancy == 33
        assert loc.entry_qr_code == "keep-me"

    @pytest.mark.asyncio
    async def test_update_missing(self, db):
        with pytest.raises(NotFound):
            await admin_service.update_location(db, "nowhere", LocationUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_rotate_invalidates_old_token(self, db):
        add_location(db, "loc-1", token="old")

        loc = await admin_service.rotate_qr_code(db, "loc-1")

        assert loc.entry_qr_code != "old"
        (qr,) = admin_service.qr_codes(db)
        assert qr["payload"] == f"smartqueue://scan/loc-1/entry/{loc.entry_qr_code}"

    @pytest.mark.asyncio
    async def test_delete_cleans_up_references(self, db, student):
        add_location(db, "loc-1")
        add_location(db, "loc-2", name="Central Library", token="tok-2")
        queued = AuthUser(uid="student-2")
        await join_queue(db, queued, "loc-1")
        await check_in(db, student, "loc-1", "abc123")

        await admin_service.delete_location(db, "loc-1")

        assert db.query(Location).filter(Location.id == "loc-1").first() is None
        assert db.query(Ticket).count() == 0
        assert db.query(Checkin).filter(Checkin.status == "active").count() == 0
        profile = db.query(UserProfile).filter(UserProfile.uid == student.uid).first()
        assert profile.current_location_id is None

        # free to check in somewhere else now
        await check_in(db, student, "loc-2", "tok-2")

    @pytest.mark.asyncio
    async def test_delete_missing(self, db):
        with pytest.raises(NotFound):
            await admin_service.delete_location(db, "nowhere")


class TestAdminsAndStats:
    def test_role_must_be_admin(self, db):
        db.add(Admin(email="staff@campus.edu", role="viewer"))
        db.commit()

        assert admin_service.is_admin(db, "staff@campus.edu") is False
        assert admin_service.is_admin(db, "nobody@campus.edu") is False
        assert admin_service.is_admin(db, None) is False

        admin_service.grant_admin(db, "staff@campus.edu")
        assert admin_service.is_admin(db, "staff@campus.edu") is True

    @pytest.mark.asyncio
    async def test_dashboard_stats(self, db, student):
        add_location(db, "a", occupancy=10, capacity=100)
        add_location(db, "b", occupancy=45, capacity=50)
        await check_in(db, student, "a", "abc123")

        stats = admin_service.dashboard_stats(db)

        assert stats["active_checkins"] == 1
        assert stats["total_users"] == 1
        assert stats["total_occupancy"] == 56
        assert stats["avg_occupancy_percent"] == round((11 + 90) / 2)
        assert stats["location_count"] == 2

    def test_dashboard_stats_empty(self, db):
        assert admin_service.dashboard_stats(db)["avg_occupancy_percent"] == 0
