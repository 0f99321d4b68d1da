from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from app.models.expense import OriginKind
from app.services.exchange_rates import ExchangeRateService
from app.strategies.automatic_debit import AutomaticDebitStrategy
from app.strategies.immediate import ImmediateStrategy
from app.strategies.installment import InstallmentStrategy
from app.strategies.recurring import RecurringStrategy
from app.strategies.registry import build_strategies


def source(**overrides):
    values = dict(
        id=7,
        user_id=1,
        description="Internet",
        category_id=1,
        importance_id=2,
        payment_type_id=3,
        card_id=None,
        amount=Decimal("100.00"),
        payment_day=10,
        payment_month=None,
        frequency_id=1,
        frequency=SimpleNamespace(name="monthly"),
        is_active=True,
        start_date=None,
        end_date=None,
        last_generated_date=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def service():
    return ExchangeRateService(ttl_seconds=60)


def test_registry_covers_every_origin_kind(service):
    strategies = build_strategies(service)
    assert set(strategies) == set(OriginKind)
    for kind, strategy in strategies.items():
        assert strategy.get_type() == kind


class TestBaseContract:
    def test_validate_source_requires_references(self, service):
        strategy = RecurringStrategy(service)
        assert strategy.validate_source(source())
        assert not strategy.validate_source(source(category_id=None))
        assert not strategy.validate_source(source(payment_type_id=None))
        assert not strategy.validate_source(source(user_id=None))
        assert not strategy.validate_source(None)

    def test_recurring_sources_need_day_and_frequency(self, service):
        strategy = RecurringStrategy(service)
        assert not strategy.validate_source(source(frequency_id=None))
        assert not strategy.validate_source(source(payment_day=None))
        assert not strategy.validate_source(source(payment_day=32))

    def test_ledger_entry_data_stamps_origin_and_merges_overrides(self, service):
        strategy = RecurringStrategy(service)
        data = strategy.create_ledger_entry_data(source(card_id=4), date=date(2024, 1, 10), amount_ars=Decimal("100"))
        assert data["origin_kind"] == OriginKind.recurring
        assert data["origin_id"] == 7
        assert data["card_id"] == 4
        assert data["description"] == "Internet"
        assert data["date"] == date(2024, 1, 10)
        assert data["amount_ars"] == Decimal("100")


class TestImmediateStrategy:
    async def test_due_while_unprocessed(self, service):
        strategy = ImmediateStrategy(service)
        assert await strategy.should_generate(SimpleNamespace(processed=False))
        assert await strategy.should_generate(SimpleNamespace(processed=None))
        assert await strategy.should_generate(SimpleNamespace())
        assert not await strategy.should_generate(SimpleNamespace(processed=True))


class TestRecurringStrategy:
    async def test_generates_on_payment_day(self, service):
        assert await RecurringStrategy(service).should_generate(source(), date(2024, 3, 10))

    async def test_other_days_never_generate(self, service):
        strategy = RecurringStrategy(service)
        assert not await strategy.should_generate(source(), date(2024, 3, 11))
        assert not await strategy.should_generate(source(), date(2024, 3, 9))

    async def test_inactive_source_is_skipped(self, service):
        assert not await RecurringStrategy(service).should_generate(source(is_active=False), date(2024, 3, 10))

    async def test_annual_source_checks_month(self, service):
        strategy = RecurringStrategy(service)
        annual = source(payment_month=6)
        assert not await strategy.should_generate(annual, date(2024, 3, 10))
        assert await strategy.should_generate(annual, date(2024, 6, 10))

    async def test_boundaries_are_inclusive(self, service):
        strategy = RecurringStrategy(service)
        bounded = source(start_date=date(2024, 3, 10), end_date=date(2024, 5, 10))
        assert await strategy.should_generate(bounded, date(2024, 3, 10))
        assert await strategy.should_generate(bounded, date(2024, 5, 10))
        assert not await strategy.should_generate(bounded, date(2024, 2, 10))
        assert not await strategy.should_generate(bounded, date(2024, 6, 10))

    async def test_same_day_is_not_generated_twice(self, service):
        strategy = RecurringStrategy(service)
        assert not await strategy.should_generate(source(last_generated_date=date(2024, 3, 10)), date(2024, 3, 10))
        assert await strategy.should_generate(source(last_generated_date=date(2024, 2, 10)), date(2024, 3, 10))


class TestAutomaticDebitStrategy:
    async def test_end_date_is_permanent(self, service):
        strategy = AutomaticDebitStrategy(service)
        ended = source(end_date=date(2024, 3, 9))
        assert not await strategy.should_generate(ended, date(2024, 3, 10))
        assert not await strategy.should_generate(ended, date(2025, 3, 10))

    async def test_day_31_falls_on_last_day_of_short_month(self, service):
        strategy = AutomaticDebitStrategy(service)
        debit = source(payment_day=31)
        assert await strategy.should_generate(debit, date(2024, 2, 29))
        assert not await strategy.should_generate(debit, date(2024, 2, 28))
        assert await strategy.should_generate(debit, date(2023, 2, 28))
        assert await strategy.should_generate(debit, date(2024, 4, 30))
        assert not await strategy.should_generate(debit, date(2024, 3, 30))

    async def test_once_per_month(self, service):
        strategy = AutomaticDebitStrategy(service)
        assert not await strategy.should_generate(
            source(last_generated_date=date(2024, 3, 10)), date(2024, 3, 10)
        )
        assert await strategy.should_generate(source(last_generated_date=date(2024, 2, 10)), date(2024, 3, 10))

    async def test_quarterly_debit_waits_three_months(self, service):
        strategy = AutomaticDebitStrategy(service)
        quarterly = source(frequency=SimpleNamespace(name="quarterly"), last_generated_date=date(2024, 1, 10))
        assert not await strategy.should_generate(quarterly, date(2024, 3, 10))
        assert await strategy.should_generate(quarterly, date(2024, 4, 10))


def purchase(**overrides):
    values = dict(
        id=3,
        user_id=1,
        description="Laptop",
        category_id=1,
        importance_id=2,
        payment_type_id=3,
        card_id=None,
        card=None,
        total_amount=Decimal("1000.00"),
        installment_count=3,
        purchase_date=date(2024, 1, 31),
        pending_installments=True,
        last_installment_date=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestInstallmentStrategy:
    def test_installment_amount_rounds_to_cents(self, service):
        strategy = InstallmentStrategy(service)
        assert strategy.calculate_installment_amount(purchase()) == Decimal("333.33")
        assert strategy.calculate_installment_amount(purchase(installment_count=1)) == Decimal("1000.00")
        assert strategy.calculate_installment_amount(
            purchase(total_amount=Decimal("100.00"), installment_count=6)
        ) == Decimal("16.67")

    def test_credit_card_detection(self, service):
        strategy = InstallmentStrategy(service)
        credit = SimpleNamespace(card_type="credit", closing_day=20, due_day=5)
        debit = SimpleNamespace(card_type="debit", closing_day=None, due_day=None)
        assert strategy.is_credit_card_payment(purchase(card_id=1, card=credit))
        assert not strategy.is_credit_card_payment(purchase(card_id=1, card=debit))
        assert not strategy.is_credit_card_payment(purchase())

    async def test_single_payment_due_on_purchase_date(self, service):
        strategy = InstallmentStrategy(service)
        strategy.generated_count = AsyncMock(return_value=0)
        single = purchase(installment_count=1, purchase_date=date(2024, 5, 4))
        assert await strategy.should_generate(single, date(2024, 5, 4))
        assert not await strategy.should_generate(single, date(2024, 5, 5))

    async def test_next_installment_due_date_is_clamped(self, service):
        strategy = InstallmentStrategy(service)
        strategy.generated_count = AsyncMock(return_value=1)
        first_paid = purchase(last_installment_date=date(2024, 1, 31))
        assert await strategy.should_generate(first_paid, date(2024, 2, 29))
        assert not await strategy.should_generate(first_paid, date(2024, 2, 28))

    async def test_nothing_due_once_all_installments_exist(self, service):
        strategy = InstallmentStrategy(service)
        strategy.generated_count = AsyncMock(return_value=3)
        assert not await strategy.should_generate(purchase(), date(2024, 4, 30))

    async def test_not_pending_is_never_due(self, service):
        strategy = InstallmentStrategy(service)
        strategy.generated_count = AsyncMock(return_value=0)
        assert not await strategy.should_generate(purchase(pending_installments=False), date(2024, 1, 31))

    async def test_credit_card_purchase_follows_billing_cycle(self, service):
        strategy = InstallmentStrategy(service)
        strategy.generated_count = AsyncMock(return_value=0)
        card = SimpleNamespace(card_type="credit", closing_day=20, due_day=5)
        paid_by_card = purchase(card_id=1, card=card, purchase_date=date(2024, 1, 15))
        assert not await strategy.should_generate(paid_by_card, date(2024, 1, 15))
        assert await strategy.should_generate(paid_by_card, date(2024, 2, 5))
