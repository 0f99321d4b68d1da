from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.utils.dates import (
    add_months,
    first_credit_card_due_date,
    installment_due_date,
    last_day_of_month,
    months_between,
    to_date,
    upcoming_due_dates,
)


def credit_card(closing_day=20, due_day=5):
    return SimpleNamespace(card_type="credit", closing_day=closing_day, due_day=due_day)


class TestAddMonths:
    @pytest.mark.parametrize(
        "anchor, months, expected",
        [
            (date(2024, 1, 31), 1, date(2024, 2, 29)),
            (date(2023, 1, 31), 1, date(2023, 2, 28)),
            (date(2024, 1, 31), 2, date(2024, 3, 31)),
            (date(2024, 3, 31), 1, date(2024, 4, 30)),
            (date(2024, 11, 15), 3, date(2025, 2, 15)),
            (date(2024, 5, 10), 0, date(2024, 5, 10)),
        ],
    )
    def test_clamps_to_last_day_of_target_month(self, anchor, months, expected):
        assert add_months(anchor, months) == expected

    def test_explicit_day_is_clamped_too(self):
        assert add_months(date(2024, 1, 5), 1, day=31) == date(2024, 2, 29)

    def test_clamping_does_not_drift(self):
        # Always offset from the anchor, never from the previous (clamped) result
        anchor = date(2024, 1, 31)
        assert [add_months(anchor, k) for k in range(3)] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]


def test_last_day_of_month_handles_leap_years():
    assert last_day_of_month(2024, 2) == 29
    assert last_day_of_month(2023, 2) == 28
    assert last_day_of_month(2024, 12) == 31


def test_months_between_ignores_day():
    assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1
    assert months_between(date(2023, 11, 1), date(2024, 2, 28)) == 3


def test_to_date_strips_time_and_timezone():
    assert to_date(datetime(2024, 3, 10, 23, 59)) == date(2024, 3, 10)
    assert to_date("2024-03-10T10:00:00Z") == date(2024, 3, 10)
    assert to_date(date(2024, 3, 10)) == date(2024, 3, 10)


class TestCreditCardDueDates:
    def test_purchase_before_closing_is_due_next_month(self):
        assert first_credit_card_due_date(date(2024, 1, 15), 20, 5) == date(2024, 2, 5)

    def test_purchase_on_closing_day_is_in_current_statement(self):
        assert first_credit_card_due_date(date(2024, 1, 20), 20, 5) == date(2024, 2, 5)

    def test_purchase_after_closing_rolls_one_more_month(self):
        assert first_credit_card_due_date(date(2024, 1, 25), 20, 5) == date(2024, 3, 5)

    def test_year_rollover(self):
        assert first_credit_card_due_date(date(2024, 12, 28), 20, 10) == date(2025, 2, 10)

    def test_installments_follow_card_due_day(self):
        purchase = SimpleNamespace(purchase_date=date(2024, 1, 15), installment_count=3, card=credit_card(due_day=31))
        assert [installment_due_date(purchase, k) for k in range(3)] == [
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_debit_card_uses_purchase_date(self):
        card = SimpleNamespace(card_type="debit", closing_day=20, due_day=5)
        purchase = SimpleNamespace(purchase_date=date(2024, 1, 31), installment_count=3, card=card)
        assert installment_due_date(purchase, 1) == date(2024, 2, 29)


def test_upcoming_due_dates_lists_remaining_installments():
    purchase = SimpleNamespace(purchase_date=date(2024, 1, 31), installment_count=3, card=None)
    assert upcoming_due_dates(purchase, generated=1) == [
        (2, date(2024, 2, 29)),
        (3, date(2024, 3, 31)),
    ]
    assert upcoming_due_dates(purchase, generated=3) == []
