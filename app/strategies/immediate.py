# app/strategies/immediate.py
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidSourceError
from app.models.expense import Expense, OriginKind
from app.strategies.base import GenerationStrategy
from app.utils.dates import to_date

logger = logging.getLogger(__name__)


class ImmediateStrategy(GenerationStrategy):
    """One-off expenses are due as soon as they exist and are unprocessed."""

    required_fields = GenerationStrategy.required_fields + ("amount", "date")

    def get_type(self) -> OriginKind:
        return OriginKind.one_off

    async def should_generate(self, source: Any, today: Optional[date] = None, db: Optional[AsyncSession] = None) -> bool:
        return not getattr(source, "processed", False)

    async def generate(self, source: Any, db: AsyncSession, today: Optional[date] = None) -> Expense:
        """
        Create the ledger entry for ``source``.

        Marking the source as processed is left to the caller, which must do
        it in the same transaction.
        """
        if not self.validate_source(source):
            raise InvalidSourceError(self.get_type().value, getattr(source, "id", None))

        amounts = await self.resolve_amounts(source, source.amount, db)
        data = self.create_ledger_entry_data(source, date=to_date(source.date), **amounts)
        return await self.create_entry(data, db)
