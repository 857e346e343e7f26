# app/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite works for local runs and tests).
All models are auto-imported in create_tables() so every table is created in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from app.config import settings

if settings.DATABASE_URL.startswith("sqlite"):
    _engine_options = {"connect_args": {"check_same_thread": False}}
else:
    _engine_options = {"pool_size": 10, "max_overflow": 20}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,          # Auto-reconnect if DB connection drops
    echo=False,                  # Set True to log all SQL queries (debug only)
    **_engine_options,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.location import Location            # noqa
    from app.models.ticket import Ticket                # noqa
    from app.models.checkin import Checkin              # noqa
    from app.models.user_profile import UserProfile     # noqa
    from app.models.admin import Admin                  # noqa

    Base.metadata.create_all(bind=bind or engine)
