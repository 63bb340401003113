# scripts/setup/init_db.py
"""
Initialize the SQL document store: creates the documents and unique_keys tables.
Run once before first launch with STORE_BACKEND=sql.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from logitrack.database import create_tables, engine
from logitrack.config import settings
from sqlalchemy import inspect, text


def main():
    print("🗄️  LogiTrack DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    if settings.STORE_BACKEND != "sql":
        print(f"ℹ️  STORE_BACKEND is '{settings.STORE_BACKEND}', nothing to create")
        return

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ All tables created")

    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn logitrack.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
