# app/utils/dates.py
import calendar
from datetime import date, datetime
from typing import Any, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from app.core.config import settings


# ────────────────────────────────────────────────────────────────────────────────
# "TODAY" AND NORMALIZATION
# ────────────────────────────────────────────────────────────────────────────────
def today_in_tz(tz_name: Optional[str] = None) -> date:
    """Calendar date in the configured business timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.TIMEZONE)).date()


def to_date(value: Union[date, datetime, str]) -> date:
    """Strip any time/timezone component and return a plain calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO strings, possibly with a time part ("2024-01-31T10:00:00Z")
    return date.fromisoformat(str(value)[:10])


# ────────────────────────────────────────────────────────────────────────────────
# MONTH ARITHMETIC
# ────────────────────────────────────────────────────────────────────────────────
def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(anchor: date, months: int, day: Optional[int] = None) -> date:
    """
    Move ``anchor`` forward by ``months`` calendar months and land on ``day``
    (defaults to the anchor's day), clamped to the last day of the target month.

        add_months(date(2024, 1, 31), 1) -> 2024-02-29
    """
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    target_day = day if day is not None else anchor.day
    return date(year, month, min(target_day, last_day_of_month(year, month)))


def months_between(earlier: date, later: date) -> int:
    """Whole calendar months from ``earlier`` to ``later``, ignoring the day."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


# ────────────────────────────────────────────────────────────────────────────────
# CREDIT CARD BILLING CYCLE
# ────────────────────────────────────────────────────────────────────────────────
DEFAULT_CLOSING_DAY = 28


def first_credit_card_due_date(purchase_date: date, closing_day: Optional[int], due_day: int) -> date:
    """
    Due date of the first installment of a credit card purchase.

    A purchase made on or before the card's closing day lands in the current
    statement, due on ``due_day`` of the next month. A purchase after the
    closing day rolls into the following statement, one month later.
    """
    closing = min(closing_day or DEFAULT_CLOSING_DAY,
                  last_day_of_month(purchase_date.year, purchase_date.month))
    months_ahead = 1 if purchase_date.day <= closing else 2
    return add_months(purchase_date, months_ahead, day=due_day)


def billing_cycle(purchase: Any) -> Optional[Tuple[Optional[int], int]]:
    """(closing_day, due_day) when the purchase was paid with a credit card that has a due day."""
    card = getattr(purchase, "card", None)
    if card is None or getattr(card, "card_type", None) != "credit":
        return None
    if not getattr(card, "due_day", None):
        return None
    return card.closing_day, card.due_day


def installment_due_date(purchase: Any, index: int) -> date:
    """
    Due date of installment number ``index`` (zero based).

    Without a billing cycle the anchor is the purchase date itself; with one,
    the anchor is the first statement due date and every installment lands on
    the card's due day. Either way the day is clamped in short months.
    """
    purchase_date = to_date(purchase.purchase_date)
    cycle = billing_cycle(purchase)
    if cycle is not None:
        closing_day, due_day = cycle
        first_due = first_credit_card_due_date(purchase_date, closing_day, due_day)
        return add_months(first_due, index, day=due_day)
    return add_months(purchase_date, index, day=purchase_date.day)


def upcoming_due_dates(purchase: Any, generated: int) -> List[Tuple[int, date]]:
    """(installment number, due date) for every installment not generated yet."""
    total = max(purchase.installment_count or 1, 1)
    return [
        (k + 1, installment_due_date(purchase, k))
        for k in range(generated, total)
    ]
