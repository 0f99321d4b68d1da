# app/strategies/recurring.py
from app.models.expense import OriginKind
from app.strategies.base_recurring import BaseRecurringStrategy


class RecurringStrategy(BaseRecurringStrategy):
    # Interval throttling (weekly, quarterly, ...) is applied by the generator service
    def get_type(self) -> OriginKind:
        return OriginKind.recurring
