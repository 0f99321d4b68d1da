# app/strategies/automatic_debit.py
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.expense import OriginKind
from app.strategies.base_recurring import BaseRecurringStrategy
from app.utils.dates import last_day_of_month, to_date
from app.utils.frequency import months_interval_elapsed

logger = logging.getLogger(__name__)


class AutomaticDebitStrategy(BaseRecurringStrategy):
    """
    Automatic debits fire once per (month, year). A payment day past the end
    of a short month falls on its last day, and the end date stops the debit
    for good even while it is still flagged active.
    """

    def get_type(self) -> OriginKind:
        return OriginKind.automatic_debit

    def effective_payment_day(self, source: Any, today: date) -> int:
        return min(source.payment_day, last_day_of_month(today.year, today.month))

    def already_generated(self, source: Any, today: date) -> bool:
        last = getattr(source, "last_generated_date", None)
        if not last:
            return False
        last = to_date(last)
        return (last.year, last.month) == (today.year, today.month)

    async def should_generate(self, source: Any, today: date, db: Optional[AsyncSession] = None) -> bool:
        end_date = getattr(source, "end_date", None)
        if end_date and today > to_date(end_date):
            logger.debug(f"automatic-debit source {source.id} ended on {end_date}")
            return False

        if not await super().should_generate(source, today, db):
            return False

        frequency = getattr(source, "frequency", None)
        frequency_name = getattr(frequency, "name", None)
        last = getattr(source, "last_generated_date", None)
        if not months_interval_elapsed(to_date(last) if last else None, today, frequency_name):
            logger.debug(f"automatic-debit source {source.id}: {frequency_name} interval not elapsed since {last}")
            return False
        return True
