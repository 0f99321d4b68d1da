# app/strategies/base.py
import abc
import logging
from datetime import date
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NoRateConfiguredError
from app.crud import expense as expense_crud
from app.models.expense import Currency, Expense, OriginKind
from app.services.exchange_rates import ExchangeRateService, to_money

logger = logging.getLogger(__name__)


class GenerationStrategy(abc.ABC):
    """
    Decides whether a source row is due and materializes it as a ledger entry.

    Strategies never commit: every write goes through the session handed to
    ``generate`` and the caller owns the transaction around it.
    """

    # Fields every source must carry before a ledger entry can be built
    required_fields: Tuple[str, ...] = ("category_id", "importance_id", "payment_type_id", "user_id")

    def __init__(self, currency: ExchangeRateService):
        self.currency = currency

    @abc.abstractmethod
    def get_type(self) -> OriginKind:
        ...

    @abc.abstractmethod
    async def should_generate(self, source: Any, today: date, db: Optional[AsyncSession] = None) -> bool:
        ...

    @abc.abstractmethod
    async def generate(self, source: Any, db: AsyncSession, today: date) -> Optional[Expense]:
        ...

    def validate_source(self, source: Any) -> bool:
        if source is None:
            return False
        return all(getattr(source, field, None) for field in self.required_fields)

    def create_ledger_entry_data(self, source: Any, **overrides: Any) -> Dict[str, Any]:
        data = {
            "user_id": source.user_id,
            "description": source.description,
            "category_id": source.category_id,
            "importance_id": source.importance_id,
            "payment_type_id": source.payment_type_id,
            "card_id": getattr(source, "card_id", None),
            "origin_currency": getattr(source, "origin_currency", None) or Currency.ARS,
            "origin_kind": self.get_type(),
            "origin_id": source.id,
        }
        data.update(overrides)
        return data

    async def resolve_amounts(self, source: Any, amount: Any, db: AsyncSession) -> Dict[str, Any]:
        """
        Dual-currency ledger fields for ``amount``.

        Uses the source's reference rate when it has one, else the current
        rate. An ARS source with no rate at all keeps its ARS amount and
        leaves the USD side empty.
        """
        origin_currency = getattr(source, "origin_currency", None) or Currency.ARS
        reference_rate = getattr(source, "reference_rate", None)
        try:
            amounts = await self.currency.calculate_both_amounts(
                amount, origin_currency, db=db, rate=reference_rate or None
            )
        except NoRateConfiguredError:
            if Currency(origin_currency) != Currency.ARS:
                raise
            logger.warning(f"No exchange rate configured, storing {self.get_type().value} source {source.id} in ARS only")
            return {"amount_ars": to_money(amount), "amount_usd": None, "exchange_rate_used": None}
        return {
            "amount_ars": amounts.amount_ars,
            "amount_usd": amounts.amount_usd,
            "exchange_rate_used": amounts.rate_used,
        }

    async def create_entry(self, data: Dict[str, Any], db: AsyncSession) -> Expense:
        entry = await expense_crud.create_expense(data, db)
        logger.info(
            f"Generated {self.get_type().value} expense {entry.id} from source {data['origin_id']} "
            f"(ars={entry.amount_ars} usd={entry.amount_usd})"
        )
        return entry
