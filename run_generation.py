#!/usr/bin/env python3
"""
One-shot daily job: refresh the exchange rate, refresh recurring amounts and
materialize every due source into the ledger.

Usage (cron):  python run_generation.py [--user-id N] [--date YYYY-MM-DD] [--skip-rate-refresh]
Exits non-zero only when the run itself fails; per-source errors are printed.
"""
import argparse
import asyncio
import json
import logging
import platform
import sys
from datetime import date

from app.core.config import settings
from app.core.database import AsyncSessionLocal, engine
from app.core.db_utils import transaction_scope
from app.core.exceptions import NoRateConfiguredError
from app.services.exchange_rates import ExchangeRateService
from app.services.expense_generator import ExpenseGeneratorService

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("run_generation")


async def refresh_rates(service: ExchangeRateService) -> None:
    async with transaction_scope(AsyncSessionLocal) as session:
        rate = await service.refresh_from_api(session)
        if rate is not None:
            print(f"💱 Exchange rate for {rate.date}: buy={rate.buy_rate} sell={rate.sell_rate} ({rate.source.value})")

    try:
        async with transaction_scope(AsyncSessionLocal) as session:
            refreshed = await service.refresh_source_amounts(session)
            print(f"🔁 Refreshed amounts on {refreshed} recurring sources")
    except NoRateConfiguredError:
        print("⚠️  No exchange rate configured, recurring amounts left unchanged")


async def run(args: argparse.Namespace) -> int:
    service = ExchangeRateService()
    generator = ExpenseGeneratorService(AsyncSessionLocal, service)
    try:
        if not args.skip_rate_refresh:
            try:
                await refresh_rates(service)
            except Exception as e:
                # Generation still runs on the last stored rate
                print(f"⚠️  Exchange rate refresh failed: {str(e)}")
                logger.exception("Exchange rate refresh failed")
        result = await generator.generate_all_pending(user_id=args.user_id, today=args.date)
    except Exception as e:
        print(f"❌ Generation run failed: {str(e)}")
        logger.exception("Generation run failed")
        return 1
    finally:
        await engine.dispose()

    print(f"✅ Generated {len(result['success'])} expenses in {result['processing_time_ms']}ms")
    for kind, counters in result["summary"].items():
        print(f"   📋 {kind}: {counters}")
    if result["errors"]:
        print(f"⚠️  {len(result['errors'])} sources failed:")
        print(json.dumps(result["errors"], indent=2))
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Materialize due expenses into the ledger")
    parser.add_argument("--user-id", type=int, default=None, help="only process sources of this user")
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="generate as of this day (YYYY-MM-DD)")
    parser.add_argument("--skip-rate-refresh", action="store_true", help="do not call the exchange rate feed")
    return parser.parse_args(argv)


def main():
    if platform.system() == 'Windows':
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
