"""
Initialize database — creates all tables and seeds the default campus locations.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--admin someone@campus.edu] [--no-seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.services.admin_service import grant_admin
from app.services.location_registry import seed_defaults
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Create SmartQueue tables and seed data")
    parser.add_argument("--admin", action="append", default=[], metavar="EMAIL",
                        help="grant the admin role to this email (repeatable)")
    parser.add_argument("--no-seed", action="store_true", help="skip default locations")
    args = parser.parse_args()

    print("🗄️  SmartQueue DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables ready ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = SessionLocal()
    try:
        if not args.no_seed:
            added = seed_defaults(db)
            print(f"\n📍 Default locations: {'seeded ' + str(added) if added else 'already present'}")
        for email in args.admin:
            grant_admin(db, email)
            print(f"🔑 Admin role granted: {email}")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
