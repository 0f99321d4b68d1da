# app/strategies/installment.py
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import expense as expense_crud
from app.models.expense import Expense, OriginKind
from app.services.exchange_rates import CENT
from app.strategies.base import GenerationStrategy
from app.utils.dates import billing_cycle, installment_due_date, today_in_tz, to_date

logger = logging.getLogger(__name__)


class InstallmentStrategy(GenerationStrategy):
    """
    Purchases paid in one or more monthly installments.

    Installment k (zero based) is due k months after the anchor: the purchase
    date, or the first statement due date when paid with a credit card. The
    ledger entry is dated on the day it is generated.
    """

    required_fields = GenerationStrategy.required_fields + ("total_amount", "purchase_date")

    def get_type(self) -> OriginKind:
        return OriginKind.installment

    def validate_source(self, source: Any) -> bool:
        if not super().validate_source(source):
            return False
        return (getattr(source, "installment_count", None) or 1) >= 1

    def is_credit_card_payment(self, source: Any) -> bool:
        card = getattr(source, "card", None)
        return bool(getattr(source, "card_id", None)) and card is not None and card.card_type == "credit"

    def total_installments(self, source: Any) -> int:
        return max(getattr(source, "installment_count", None) or 1, 1)

    def calculate_installment_amount(self, source: Any) -> Decimal:
        total = Decimal(str(source.total_amount))
        return (total / self.total_installments(source)).quantize(CENT, rounding=ROUND_HALF_UP)

    async def generated_count(self, source: Any, db: AsyncSession) -> int:
        return await expense_crud.count_by_origin(self.get_type(), source.id, db)

    def next_due_date(self, source: Any, generated: int) -> date:
        if self.is_credit_card_payment(source) and billing_cycle(source) is None:
            logger.warning(f"Purchase {source.id}: credit card {source.card_id} has no due day, using the purchase date")
        return installment_due_date(source, generated)

    async def should_generate(self, source: Any, today: date, db: Optional[AsyncSession] = None) -> bool:
        if not getattr(source, "pending_installments", False):
            return False

        generated = await self.generated_count(source, db)
        if generated >= self.total_installments(source):
            logger.debug(f"Purchase {source.id}: all {generated} installments already generated")
            return False

        last = getattr(source, "last_installment_date", None)
        if generated and last:
            last = to_date(last)
            if (last.year, last.month) == (today.year, today.month):
                logger.debug(f"Purchase {source.id}: an installment was already generated this month")
                return False

        due = self.next_due_date(source, generated)
        if today != due:
            logger.debug(f"Purchase {source.id}: installment {generated + 1} due on {due}")
            return False
        return True

    async def generate(self, source: Any, db: AsyncSession, today: Optional[date] = None) -> Optional[Expense]:
        today = today or today_in_tz()
        if not self.validate_source(source) or not await self.should_generate(source, today, db):
            return None

        total = self.total_installments(source)
        number = await self.generated_count(source, db) + 1
        amount = self.calculate_installment_amount(source)

        amounts = await self.resolve_amounts(source, amount, db)
        data = self.create_ledger_entry_data(
            source,
            date=today,
            description=f"{source.description} (Installment {number}/{total})",
            total_installments=total,
            paid_installments=number,
            **amounts,
        )
        entry = await self.create_entry(data, db)

        source.last_installment_date = today
        if number >= total:
            source.pending_installments = False
            logger.info(f"Purchase {source.id} fully generated ({total} installments)")
        db.add(source)
        await db.flush()
        return entry
