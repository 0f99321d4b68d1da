# app/crud/expense.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from app.models.expense import Expense, OriginKind
from typing import Any, Dict, Optional

# Ledger repository. Callers own the transaction: these helpers flush, never commit.

async def create_expense(data: Dict[str, Any], db: AsyncSession) -> Expense:
    new_ex = Expense(**data)
    db.add(new_ex)
    await db.flush()
    await db.refresh(new_ex)
    return new_ex

async def count_by_origin(origin_kind: OriginKind, origin_id: int, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Expense.id)).where(
            Expense.origin_kind == origin_kind,
            Expense.origin_id == origin_id,
        )
    )
    return result.scalar_one()

async def get_by_origin(origin_kind: OriginKind, origin_id: int, db: AsyncSession) -> Optional[Expense]:
    result = await db.execute(
        select(Expense)
        .where(Expense.origin_kind == origin_kind, Expense.origin_id == origin_id)
        .order_by(Expense.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
