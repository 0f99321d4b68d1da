# app/strategies/base_recurring.py
import logging
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.expense import Expense
from app.services.exchange_rates import to_money
from app.strategies.base import GenerationStrategy
from app.utils.dates import today_in_tz, to_date

logger = logging.getLogger(__name__)


class BaseRecurringStrategy(GenerationStrategy):
    """Day-of-month scheduling shared by recurring expenses and automatic debits."""

    required_fields = GenerationStrategy.required_fields + ("amount", "payment_day", "frequency_id")

    def validate_source(self, source: Any) -> bool:
        if not super().validate_source(source):
            return False
        return 1 <= int(source.payment_day) <= 31

    def validate_date_boundaries(self, source: Any, today: date) -> bool:
        """Inclusive on both ends; a missing boundary imposes nothing."""
        start_date = getattr(source, "start_date", None)
        if start_date and today < to_date(start_date):
            logger.debug(f"{self.get_type().value} source {source.id}: start date {start_date} not reached")
            return False
        end_date = getattr(source, "end_date", None)
        if end_date and today > to_date(end_date):
            logger.debug(f"{self.get_type().value} source {source.id}: end date {end_date} passed")
            return False
        return True

    def effective_payment_day(self, source: Any, today: date) -> int:
        return source.payment_day

    def already_generated(self, source: Any, today: date) -> bool:
        last = getattr(source, "last_generated_date", None)
        return bool(last) and to_date(last) == today

    async def should_generate(self, source: Any, today: date, db: Optional[AsyncSession] = None) -> bool:
        kind = self.get_type().value
        if not getattr(source, "is_active", False):
            logger.debug(f"{kind} source {source.id} is not active")
            return False
        if today.day != self.effective_payment_day(source, today):
            logger.debug(f"{kind} source {source.id}: day {today.day} is not payment day {source.payment_day}")
            return False
        payment_month = getattr(source, "payment_month", None)
        if payment_month and today.month != payment_month:
            logger.debug(f"{kind} source {source.id}: month {today.month} is not payment month {payment_month}")
            return False
        if not self.validate_date_boundaries(source, today):
            return False
        if self.already_generated(source, today):
            logger.debug(f"{kind} source {source.id} already generated for {today}")
            return False
        return True

    async def _recurring_amounts(self, source: Any, db: AsyncSession) -> Dict[str, Any]:
        # Amounts refreshed daily on the source take precedence over a fresh conversion
        if getattr(source, "amount_ars", None) is not None:
            return {
                "amount_ars": to_money(source.amount_ars),
                "amount_usd": to_money(source.amount_usd) if source.amount_usd is not None else None,
                "exchange_rate_used": getattr(source, "reference_rate", None),
            }
        return await self.resolve_amounts(source, source.amount, db)

    async def generate_recurring_expense_with_date(
        self,
        source: Any,
        overrides: Dict[str, Any],
        on_date: date,
        db: AsyncSession,
    ) -> Optional[Expense]:
        if not self.validate_source(source):
            logger.warning(f"{self.get_type().value} source {getattr(source, 'id', None)} is missing required fields")
            return None

        amounts = await self._recurring_amounts(source, db)
        data = self.create_ledger_entry_data(source, date=on_date, **amounts)
        data.update(overrides)
        entry = await self.create_entry(data, db)

        source.last_generated_date = on_date
        db.add(source)
        await db.flush()
        return entry

    async def generate_recurring_expense(
        self,
        source: Any,
        overrides: Dict[str, Any],
        db: AsyncSession,
        today: Optional[date] = None,
    ) -> Optional[Expense]:
        return await self.generate_recurring_expense_with_date(source, overrides, today or today_in_tz(), db)

    async def generate(self, source: Any, db: AsyncSession, today: Optional[date] = None) -> Optional[Expense]:
        today = today or today_in_tz()
        if not self.validate_source(source) or not await self.should_generate(source, today, db):
            return None
        return await self.generate_recurring_expense_with_date(
            source, {"frequency_id": source.frequency_id}, today, db
        )
