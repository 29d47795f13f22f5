# scripts/setup/init_db.py
"""
Initialize database — creates all tables.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed-faculty "Name,email,department"]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import datetime
from sqlalchemy import inspect, text
from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.models.user import User


def seed_faculty(entry: str):
    name, email, department = [part.strip() for part in entry.split(",", 2)]
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            print(f"   - {email} already exists, skipped")
            return
        db.add(User(name=name, email=email, role="faculty", department=department,
                    created_at=datetime.utcnow()))
        db.commit()
        print(f"   ✓ faculty {name} <{email}> ({department})")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create Campus Gate tables")
    parser.add_argument("--seed-faculty", action="append", default=[],
                        help='"Name,email,department" — may be repeated')
    args = parser.parse_args()

    print("Campus Gate DB Initialization")
    print("=" * 40)
    print(f"Database: {settings.DATABASE_URL}")

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

    print("\nCreating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"\nTables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed_faculty:
        print("\nSeeding faculty...")
        for entry in args.seed_faculty:
            seed_faculty(entry)

    print("\nDatabase ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
