"""Shared fixtures: an isolated in-memory SQLite store per test."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEFAULT_LOCATIONS"] = "false"
os.environ["DEMO_MODE"] = "false"
os.environ["API_KEY"] = ""
os.environ["LOG_TO_FILE"] = "false"

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables
from app.models.location import Location
from app.schemas.auth import AuthUser


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def student():
    return AuthUser(uid="student-1", email="student1@campus.edu", display_name="Student One")


def add_location(db, location_id="loc-1", name="Main Canteen", occupancy=10, capacity=100,
                 wait=12, token="abc123", type="canteen"):
    loc = Location(
        id=location_id,
        name=name,
        type=type,
        current_occupancy=occupancy,
        max_capacity=capacity,
        avg_wait_time=wait,
        position_x=30,
        position_y=40,
        entry_qr_code=token,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )
    db.add(loc)
    db.commit()
    return loc
