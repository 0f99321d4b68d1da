# app/services/expense_generator.py
"""
Daily materialization of due sources into the expenses ledger.

One run scans the four source tables for candidates, then processes every
candidate sequentially in its own transaction. A failing candidate is
rolled back and reported in ``errors``; it never aborts the run. Only a
failure of the scan itself propagates to the caller.
"""
import logging
import time
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.db_utils import transaction_scope, with_db_retry
from app.core.exceptions import GastosError, MissingForeignKeyError, NoRateConfiguredError
from app.crud import automatic_debit as debit_crud
from app.crud import catalog as catalog_crud
from app.crud import one_off as one_off_crud
from app.crud import purchase as purchase_crud
from app.crud import recurring as recurring_crud
from app.models.expense import Expense, OriginKind
from app.services.exchange_rates import ExchangeRateService
from app.strategies.registry import build_strategies
from app.utils.dates import today_in_tz, to_date
from app.utils.frequency import days_interval_elapsed

logger = logging.getLogger(__name__)

# Candidate queries, in processing order
CANDIDATE_QUERIES = {
    OriginKind.one_off: one_off_crud.find_unprocessed_ids,
    OriginKind.recurring: recurring_crud.find_active_ids,
    OriginKind.automatic_debit: debit_crud.find_active_ids,
    OriginKind.installment: purchase_crud.find_pending_installment_ids,
}

SOURCE_LOADERS = {
    OriginKind.one_off: one_off_crud.get_one_off,
    OriginKind.recurring: recurring_crud.get_recurring,
    OriginKind.automatic_debit: debit_crud.get_automatic_debit,
    OriginKind.installment: purchase_crud.get_purchase,
}


def _error_message(exc: Exception) -> str:
    if isinstance(exc, GastosError):
        return exc.message
    return str(exc) or type(exc).__name__


class ExpenseGeneratorService:
    def __init__(self, session_factory: async_sessionmaker, currency: ExchangeRateService):
        self.session_factory = session_factory
        self.currency = currency
        self.strategies = build_strategies(currency)

    # ------------------------------------------------------------
    # ENTRY POINTS
    # ------------------------------------------------------------
    async def generate_all_pending(self, user_id: Optional[int] = None, today: Optional[date] = None) -> Dict[str, Any]:
        started = time.perf_counter()
        today = today or today_in_tz()
        logger.info(f"Expense generation started for {today}" + (f" (user {user_id})" if user_id else ""))

        await self._warm_rate_cache()
        candidates = await self._scan_candidates(user_id)

        success: List[Dict[str, Any]] = []
        errors: List[Dict[str, Any]] = []
        summary = {
            kind.value: {"processed": 0, "generated": 0, "skipped": 0, "errors": 0}
            for kind in CANDIDATE_QUERIES
        }

        for kind, source_ids in candidates.items():
            counters = summary[kind.value]
            for source_id in source_ids:
                counters["processed"] += 1
                try:
                    entry = await self._process_candidate(kind, source_id, today)
                except Exception as e:
                    counters["errors"] += 1
                    errors.append({"kind": kind.value, "source_id": source_id, "error_message": _error_message(e)})
                    logger.error(f"Failed to generate {kind.value} source {source_id}: {_error_message(e)}")
                    continue

                if entry is None:
                    counters["skipped"] += 1
                    continue
                counters["generated"] += 1
                success.append({"kind": kind.value, "ledger_entry_id": entry.id, "source_id": source_id})

        processing_time_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"Expense generation finished: {len(success)} generated, {len(errors)} errors "
            f"in {processing_time_ms}ms"
        )
        return {
            "success": success,
            "errors": errors,
            "summary": summary,
            "processing_time_ms": processing_time_ms,
        }

    async def generate_from_one_off(self, source_id: int, today: Optional[date] = None) -> Optional[Expense]:
        """Materialize a single one-off right away. Errors propagate to the caller."""
        return await self._process_candidate(OriginKind.one_off, source_id, today or today_in_tz())

    # ------------------------------------------------------------
    # RUN STEPS
    # ------------------------------------------------------------
    async def _warm_rate_cache(self) -> None:
        # Keeps rate lookups out of the per-candidate transactions
        async with self.session_factory() as db:
            try:
                rate = await self.currency.get_current_rate(db)
                logger.debug(f"Using exchange rate of {rate.date} for this run")
            except NoRateConfiguredError:
                logger.warning("No exchange rate configured; USD amounts cannot be computed for ARS-only sources")

    async def _scan_candidates(self, user_id: Optional[int]) -> Dict[OriginKind, List[int]]:
        @with_db_retry(max_retries=3)
        async def scan() -> Dict[OriginKind, List[int]]:
            found = {}
            async with self.session_factory() as db:
                for kind, query in CANDIDATE_QUERIES.items():
                    found[kind] = await query(db, user_id=user_id)
            return found

        candidates = await scan()
        logger.info(
            "Candidates: " + ", ".join(f"{kind.value}={len(ids)}" for kind, ids in candidates.items())
        )
        return candidates

    async def _process_candidate(self, kind: OriginKind, source_id: int, today: date) -> Optional[Expense]:
        strategy = self.strategies[kind]
        async with transaction_scope(self.session_factory) as db:
            # Reloaded inside the transaction so the due check sees committed state
            source = await SOURCE_LOADERS[kind](source_id, db)
            if source is None:
                logger.debug(f"{kind.value} source {source_id} disappeared before processing")
                return None

            if not await self._is_due(kind, source, today, db):
                return None

            missing = await catalog_crud.find_missing_references(source, db)
            if missing:
                raise MissingForeignKeyError(kind.value, source_id, missing)

            entry = await strategy.generate(source, db, today)
            if entry is not None and kind == OriginKind.one_off:
                await one_off_crud.mark_processed(source, db)
            return entry

    async def _is_due(self, kind: OriginKind, source: Any, today: date, db: AsyncSession) -> bool:
        strategy = self.strategies[kind]

        if kind == OriginKind.installment:
            generated = await strategy.generated_count(source, db)
            if generated >= strategy.total_installments(source):
                await purchase_crud.clear_pending(source, db)
                logger.info(f"Purchase {source.id} has no installments left, cleared pending flag")
                return False

        if not await strategy.should_generate(source, today, db):
            return False

        if kind == OriginKind.recurring:
            frequency_name = getattr(source.frequency, "name", None) if source.frequency else None
            last = to_date(source.last_generated_date) if source.last_generated_date else None
            if not days_interval_elapsed(last, today, frequency_name):
                logger.debug(
                    f"recurring source {source.id}: {frequency_name} interval not elapsed since {last}"
                )
                return False
        return True
