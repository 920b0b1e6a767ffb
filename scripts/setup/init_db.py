# scripts/setup/init_db.py
"""
Initialize storage — creates the slot table and seeds empty slots with the
built-in sample data. Run once before first launch (the backend also does
this on startup).
Usage: python scripts/setup/init_db.py [--reset]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from sqlalchemy import text
from carwash.database import SessionLocal, create_tables, engine
from carwash.config import settings
from carwash.services.inbox import InboxStore
from carwash.services.ledger import LedgerStore
from carwash.services.persistence import SqlSlotGateway


def main():
    parser = argparse.ArgumentParser(description="Create storage and seed sample data")
    parser.add_argument("--reset", action="store_true", help="overwrite all slots with sample data")
    args = parser.parse_args()

    print("🗄️  Car Wash Storage Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ storage_slots ready")

    gateway = SqlSlotGateway(SessionLocal)
    ledger = LedgerStore(gateway)
    inbox = InboxStore(gateway)
    if args.reset:
        ledger.reset()
        inbox.reset()
        print("♻️  All slots reset to sample data")
    else:
        ledger.load()
        inbox.load()

    print(f"\n📊 Services: {len(ledger.services)} | Customers: {len(ledger.customers)} "
          f"| Conversations: {len(inbox.conversations)}")
    print("\n🎉 Storage ready! You can now start the backend:")
    print(f"   uvicorn carwash.main:app --host {settings.BACKEND_HOST} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
