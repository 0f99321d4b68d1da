#!/usr/bin/env python3
"""
Script to verify that the ledger tables exist and report the migration state
"""
import asyncio
import sys
import platform
from sqlalchemy import inspect, text
from app.core.database import engine

async def verify_database():
    """Check tables, Alembic revision and row counts"""

    try:
        async with engine.begin() as conn:
            print(f"🔗 Connected to {engine.url.get_backend_name()} database successfully!")

            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            print("\n📋 Tables in your database:")
            if tables:
                for table in sorted(tables):
                    print(f"   ✅ {table}")
            else:
                print("   ⚠️  No tables found")

            print("\n🔄 Migration status:")
            if "alembic_version" in tables:
                result = await conn.execute(text("SELECT version_num FROM alembic_version;"))
                version = result.fetchone()
                if version:
                    print(f"   ✅ Current Alembic version: {version[0]}")
                else:
                    print("   ⚠️  No Alembic version found")
            else:
                print("   ⚠️  Alembic version table not found (tables created at startup?)")

            print("\n📊 Table statistics:")
            for table in sorted(tables):
                if table == 'alembic_version':
                    continue
                result = await conn.execute(text(f"SELECT COUNT(*) FROM {table};"))
                print(f"   📈 {table}: {result.scalar_one()} rows")

        print("\n✅ Database verification completed successfully!")

    except Exception as e:
        print(f"❌ Database verification failed: {str(e)}")
        sys.exit(1)
    finally:
        await engine.dispose()

def main():
    """Main function with proper asyncio handling"""
    if platform.system() == 'Windows':
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

    asyncio.run(verify_database())

if __name__ == "__main__":
    main()
