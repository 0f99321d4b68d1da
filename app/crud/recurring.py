# app/crud/recurring.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.recurring import RecurringExpense
from typing import List, Optional

async def get_recurring(source_id: int, db: AsyncSession) -> Optional[RecurringExpense]:
    result = await db.execute(select(RecurringExpense).where(RecurringExpense.id == source_id))
    return result.scalar_one_or_none()

async def find_active_ids(db: AsyncSession, user_id: Optional[int] = None) -> List[int]:
    query = select(RecurringExpense.id).where(RecurringExpense.is_active.is_(True))
    if user_id is not None:
        query = query.where(RecurringExpense.user_id == user_id)
    result = await db.execute(query.order_by(RecurringExpense.id))
    return list(result.scalars().all())

async def find_active(db: AsyncSession) -> List[RecurringExpense]:
    result = await db.execute(
        select(RecurringExpense).where(RecurringExpense.is_active.is_(True)).order_by(RecurringExpense.id)
    )
    return result.unique().scalars().all()
