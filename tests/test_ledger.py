from datetime import date
from decimal import Decimal

from app.crud import expense as expense_crud
from app.models.expense import Expense, OriginKind
from app.models.recurring import RecurringExpense
from app.strategies.recurring import RecurringStrategy


def ledger_row(refs, origin_kind, origin_id, day, description="Internet"):
    return Expense(
        user_id=refs["user_id"],
        date=day,
        description=description,
        amount_ars=Decimal("1000.00"),
        category_id=refs["category_id"],
        importance_id=refs["importance_id"],
        payment_type_id=refs["payment_type_id"],
        origin_kind=origin_kind,
        origin_id=origin_id,
    )


class TestGetByOrigin:
    async def test_returns_newest_entry_for_the_pair(self, db, add, refs):
        await add(
            ledger_row(refs, OriginKind.recurring, 7, date(2024, 1, 10), "January"),
            ledger_row(refs, OriginKind.recurring, 7, date(2024, 2, 10), "February"),
            ledger_row(refs, OriginKind.automatic_debit, 7, date(2024, 3, 10), "Other kind"),
            ledger_row(refs, OriginKind.recurring, 8, date(2024, 3, 10), "Other source"),
        )

        entry = await expense_crud.get_by_origin(OriginKind.recurring, 7, db)
        assert entry.description == "February"

    async def test_none_when_nothing_was_generated(self, db, add, refs):
        await add(ledger_row(refs, OriginKind.recurring, 7, date(2024, 1, 10)))

        assert await expense_crud.get_by_origin(OriginKind.installment, 7, db) is None
        assert await expense_crud.get_by_origin(OriginKind.recurring, 99, db) is None


class TestGenerateRecurringExpense:
    async def test_entry_dated_today_and_source_stamped(self, currency, session_factory, add, rate, make_recurring, reload):
        source = await add(make_recurring(amount=Decimal("21000")))
        today = date(2024, 3, 10)

        async with session_factory() as session:
            source = await session.get(RecurringExpense, source.id)
            entry = await RecurringStrategy(currency).generate_recurring_expense(
                source, {"description": "Internet (March)"}, session, today=today
            )

            assert entry.date == today
            assert entry.description == "Internet (March)"
            assert entry.origin_kind == OriginKind.recurring
            assert entry.origin_id == source.id
            assert entry.amount_usd == Decimal("20.00")
            assert source.last_generated_date == today
            assert await expense_crud.get_by_origin(OriginKind.recurring, source.id, session) == entry
            await session.commit()

        assert (await reload(RecurringExpense, source.id)).last_generated_date == today

    async def test_invalid_source_creates_nothing(self, currency, db, add, rate, make_recurring):
        source = await add(make_recurring())
        source = await db.get(RecurringExpense, source.id)
        source.payment_day = 0

        entry = await RecurringStrategy(currency).generate_recurring_expense(source, {}, db, today=date(2024, 3, 10))
        assert entry is None
        assert await expense_crud.get_by_origin(OriginKind.recurring, source.id, db) is None
