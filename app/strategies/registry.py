# app/strategies/registry.py
from typing import Dict

from app.models.expense import OriginKind
from app.services.exchange_rates import ExchangeRateService
from app.strategies.automatic_debit import AutomaticDebitStrategy
from app.strategies.base import GenerationStrategy
from app.strategies.immediate import ImmediateStrategy
from app.strategies.installment import InstallmentStrategy
from app.strategies.recurring import RecurringStrategy

STRATEGY_CLASSES = {
    OriginKind.one_off: ImmediateStrategy,
    OriginKind.recurring: RecurringStrategy,
    OriginKind.automatic_debit: AutomaticDebitStrategy,
    OriginKind.installment: InstallmentStrategy,
}


def build_strategies(currency: ExchangeRateService) -> Dict[OriginKind, GenerationStrategy]:
    missing = set(OriginKind) - set(STRATEGY_CLASSES)
    if missing:
        raise RuntimeError(f"No generation strategy registered for: {sorted(k.value for k in missing)}")
    return {kind: cls(currency) for kind, cls in STRATEGY_CLASSES.items()}
