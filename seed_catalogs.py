#!/usr/bin/env python3
"""
Seed the catalog tables (categories, importances, payment types, frequencies).
Safe to run repeatedly: existing names are left alone.
Usage: python seed_catalogs.py
"""
import asyncio

from app.core.database import AsyncSessionLocal, engine
from app.core.db_utils import transaction_scope
from app.crud.catalog import get_or_create_by_name
from app.models.catalog import Category, Frequency, Importance, PaymentType
from app.utils.frequency import INTERVAL_DAYS

CATALOGS = {
    Category: ["Housing", "Food", "Transport", "Services", "Health", "Education", "Leisure", "Other"],
    Importance: ["Essential", "Necessary", "Optional"],
    PaymentType: ["Cash", "Debit card", "Credit card", "Bank transfer", "Virtual wallet"],
    Frequency: list(INTERVAL_DAYS),
}


async def seed_catalogs():
    print("Seeding catalogs...")
    try:
        async with transaction_scope(AsyncSessionLocal) as session:
            for model, names in CATALOGS.items():
                for name in names:
                    await get_or_create_by_name(model, name, session)
                print(f"✅ {model.__tablename__}: {len(names)} entries")
    except Exception as e:
        print(f"❌ Error seeding catalogs: {e}")
        raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_catalogs())
