"""
Shared fixtures: a fresh file-backed SQLite database per test, seeded
catalogs, an exchange rate and the services wired to that database.
"""
import os
import tempfile

# Settings are read at import time; point them at a throwaway database first
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "gastos_ledger_test.db"),
)

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base
from app.models.automatic_debit import AutomaticDebit
from app.models.card import Card, CardType
from app.models.catalog import Category, Frequency, Importance, PaymentType
from app.models.exchange_rate import ExchangeRate, RateSource
from app.models.expense import Expense, OriginKind
from app.models.one_off import OneOffExpense
from app.models.purchase import Purchase
from app.models.recurring import RecurringExpense
from app.services.exchange_rates import ExchangeRateService
from app.services.expense_generator import ExpenseGeneratorService
from app.utils.frequency import INTERVAL_DAYS

USER_ID = 1


class FakeClock:
    """Monotonic clock the tests can move forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def add(session_factory):
    """Persist rows in their own committed transaction and return them."""

    async def _add(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows[0] if len(rows) == 1 else rows

    return _add


@pytest.fixture
async def catalogs(add):
    category, importance, payment_type = await add(
        Category(name="Services"), Importance(name="Essential"), PaymentType(name="Cash")
    )
    frequencies = {}
    for name in INTERVAL_DAYS:
        frequencies[name] = (await add(Frequency(name=name))).id
    return SimpleNamespace(
        category_id=category.id,
        importance_id=importance.id,
        payment_type_id=payment_type.id,
        frequencies=frequencies,
    )


@pytest.fixture
async def rate(add):
    return await add(
        ExchangeRate(
            date=date(2024, 1, 1),
            buy_rate=Decimal("1000.00"),
            sell_rate=Decimal("1050.00"),
            source=RateSource.manual,
        )
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def currency(clock):
    return ExchangeRateService(ttl_seconds=3600, clock=clock)


@pytest.fixture
def generator(session_factory, currency):
    return ExpenseGeneratorService(session_factory, currency)


@pytest.fixture
def refs(catalogs):
    """Catalog references every source needs."""
    return dict(
        user_id=USER_ID,
        category_id=catalogs.category_id,
        importance_id=catalogs.importance_id,
        payment_type_id=catalogs.payment_type_id,
    )


@pytest.fixture
def make_one_off(refs):
    def _make(**overrides):
        values = dict(refs, description="Dentist", amount=Decimal("1500.00"), date=date(2024, 3, 10))
        values.update(overrides)
        return OneOffExpense(**values)

    return _make


@pytest.fixture
def make_recurring(refs, catalogs):
    def _make(**overrides):
        values = dict(
            refs,
            description="Internet",
            amount=Decimal("20000.00"),
            payment_day=10,
            frequency_id=catalogs.frequencies["monthly"],
            is_active=True,
        )
        values.update(overrides)
        return RecurringExpense(**values)

    return _make


@pytest.fixture
def make_debit(refs, catalogs):
    def _make(**overrides):
        values = dict(
            refs,
            description="Gym",
            amount=Decimal("15000.00"),
            payment_day=10,
            frequency_id=catalogs.frequencies["monthly"],
            is_active=True,
        )
        values.update(overrides)
        return AutomaticDebit(**values)

    return _make


@pytest.fixture
def make_purchase(refs):
    def _make(**overrides):
        values = dict(
            refs,
            description="Laptop",
            total_amount=Decimal("300000.00"),
            installment_count=3,
            purchase_date=date(2024, 1, 15),
            pending_installments=True,
        )
        values.update(overrides)
        return Purchase(**values)

    return _make


@pytest.fixture
def make_credit_card():
    def _make(**overrides):
        values = dict(user_id=USER_ID, name="Visa", card_type=CardType.credit, closing_day=20, due_day=5)
        values.update(overrides)
        return Card(**values)

    return _make


@pytest.fixture
def count_entries(session_factory):
    async def _count(kind: OriginKind, origin_id: int) -> int:
        async with session_factory() as session:
            result = await session.execute(
                select(func.count(Expense.id)).where(Expense.origin_kind == kind, Expense.origin_id == origin_id)
            )
            return result.scalar_one()

    return _count


@pytest.fixture
def reload(session_factory):
    async def _reload(model, row_id):
        async with session_factory() as session:
            return await session.get(model, row_id)

    return _reload
