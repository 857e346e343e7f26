"""Unit tests for QR check-in and in-app exit."""

import pytest
from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import patch
from conftest import add_location
from app.errors import Conflict, InvalidFormat, InvalidToken, NotFound, Unauthenticated
from app.models.checkin import Checkin
from app.models.location import Location
from app.models.user_profile import UserProfile
from app.services.checkin_service import (
    check_in, check_in_from_scan, current_checkin, exit_location, exit_time_credit,
)


def occupancy(db, location_id):
    return db.query(Location).filter(Location.id == location_id).first().current_occupancy


def profile_of(db, user):
    return db.query(UserProfile).filter(UserProfile.uid == user.uid).first()


class TestCheckIn:
    @pytest.mark.asyncio
    async def test_check_in_sets_pointer_and_occupancy(self, db, student):
        add_location(db, "loc-1", occupancy=10)

        checkin = await check_in(db, student, "loc-1", "abc123")

        assert checkin.status == "active"
        assert checkin.exit_time is None
        assert occupancy(db, "loc-1") == 11
        assert profile_of(db, student).current_location_id == "loc-1"
        assert profile_of(db, student).current_location_name == "Main Canteen"

    @pytest.mark.asyncio
    async def test_wrong_token(self, db, student):
        add_location(db, "loc-1", occupancy=10, token="abc123")

        with pytest.raises(InvalidToken):
            await check_in(db, student, "loc-1", "ABC123")

        assert occupancy(db, "loc-1") == 10
        assert db.query(Checkin).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_location(self, db, student):
        with pytest.raises(NotFound):
            await check_in(db, student, "nowhere", "abc123")

    @pytest.mark.asyncio
    async def test_requires_user(self, db):
        add_location(db)
        with pytest.raises(Unauthenticated):
            await check_in(db, None, "loc-1", "abc123")

    @pytest.mark.asyncio
    async def test_duplicate_check_in(self, db, student):
        add_location(db, "loc-1", occupancy=10)
        await check_in(db, student, "loc-1", "abc123")

        with pytest.raises(Conflict, match="already checked in"):
            await check_in(db, student, "loc-1", "abc123")
        assert occupancy(db, "loc-1") == 11

    @pytest.mark.asyncio
    async def test_one_location_at_a_time(self, db, student):
        add_location(db, "loc-a", name="Main Canteen", occupancy=10, token="tok-a")
        add_location(db, "loc-b", name="Central Library", occupancy=20, token="tok-b")
        await check_in(db, student, "loc-a", "tok-a")

        with pytest.raises(Conflict, match="exit Main Canteen first"):
            await check_in(db, student, "loc-b", "tok-b")

        assert occupancy(db, "loc-b") == 20
        assert profile_of(db, student).current_location_id == "loc-a"

    @pytest.mark.asyncio
    async def test_scan(self, db, student):
        add_location(db, "loc-1", occupancy=0, token="abc123")

        checkin = await check_in_from_scan(db, student, "smartqueue://scan/loc-1/entry/abc123")

        assert checkin.location_id == "loc-1"
        assert occupancy(db, "loc-1") == 1

    @pytest.mark.asyncio
    async def test_scan_malformed(self, db, student):
        add_location(db, "loc-1", occupancy=0)
        with pytest.raises(InvalidFormat):
            await check_in_from_scan(db, student, "smartqueue://scan/loc-1/abc123")
        assert occupancy(db, "loc-1") == 0

    @pytest.mark.asyncio
    async def test_concurrent_entry_elsewhere_is_refused(self, db, student):
        add_location(db, "loc-a", name="Library", token="tok-a")
        add_location(db, "loc-b", occupancy=7, token="tok-b")
        await check_in(db, student, "loc-a", "tok-a")

        # profile read before the other entry committed
        stale = SimpleNamespace(current_location_id=None, current_location_name=None)
        with patch("app.services.checkin_service.ensure_profile", return_value=stale):
            with pytest.raises(Conflict, match="exit Library first"):
                await check_in(db, student, "loc-b", "tok-b")

        assert occupancy(db, "loc-b") == 7
        assert db.query(Checkin).filter(Checkin.status == "active").count() == 1
        assert profile_of(db, student).current_location_id == "loc-a"


class TestExit:
    @pytest.mark.asyncio
    async def test_round_trip_restores_occupancy(self, db, student):
        add_location(db, "loc-1", occupancy=42)

        await check_in(db, student, "loc-1", "abc123")
        checkin, credit = await exit_location(db, student, "loc-1")

        assert occupancy(db, "loc-1") == 42
        assert checkin.status == "completed"
        assert checkin.exit_time is not None
        assert db.query(Checkin).filter(Checkin.status == "active").count() == 0
        assert profile_of(db, student).current_location_id is None
        assert current_checkin(db, student) is None
        assert credit == 1

    @pytest.mark.asyncio
    async def test_credit_from_time_inside(self, db, student):
        add_location(db, "loc-1", occupancy=5)
        checkin = await check_in(db, student, "loc-1", "abc123")
        checkin.entry_time = datetime.utcnow() - timedelta(minutes=40)
        db.commit()

        _, credit = await exit_location(db, student, "loc-1")

        assert credit == 12
        assert profile_of(db, student).total_time_saved == 12

    @pytest.mark.asyncio
    async def test_can_check_in_elsewhere_after_exit(self, db, student):
        add_location(db, "loc-a", token="tok-a")
        add_location(db, "loc-b", token="tok-b")

        await check_in(db, student, "loc-a", "tok-a")
        await exit_location(db, student, "loc-a")
        checkin = await check_in(db, student, "loc-b", "tok-b")

        assert current_checkin(db, student).id == checkin.id

    @pytest.mark.asyncio
    async def test_exit_without_check_in(self, db, student):
        add_location(db, "loc-1")
        with pytest.raises(NotFound):
            await exit_location(db, student, "loc-1")

    @pytest.mark.asyncio
    async def test_exit_requires_user(self, db):
        with pytest.raises(Unauthenticated):
            await exit_location(db, None, "loc-1")

    @pytest.mark.asyncio
    async def test_occupancy_never_negative(self, db, student):
        add_location(db, "loc-1", occupancy=0)
        await check_in(db, student, "loc-1", "abc123")
        db.query(Location).filter(Location.id == "loc-1").update({Location.current_occupancy: 0})
        db.commit()

        await exit_location(db, student, "loc-1")

        assert occupancy(db, "loc-1") == 0


class TestExitCredit:
    def test_minimum_one_minute(self):
        now = datetime.utcnow()
        assert exit_time_credit(now, now) == 1
        assert exit_time_credit(now - timedelta(minutes=3), now) == 1

    def test_thirty_percent_floor(self):
        now = datetime.utcnow()
        assert exit_time_credit(now - timedelta(minutes=10), now) == 3
        assert exit_time_credit(now - timedelta(minutes=95), now) == 28
