# app/crud/one_off.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_
from app.models.one_off import OneOffExpense
from typing import List, Optional

async def get_one_off(source_id: int, db: AsyncSession) -> Optional[OneOffExpense]:
    result = await db.execute(select(OneOffExpense).where(OneOffExpense.id == source_id))
    return result.scalar_one_or_none()

async def find_unprocessed_ids(db: AsyncSession, user_id: Optional[int] = None) -> List[int]:
    query = select(OneOffExpense.id).where(
        or_(OneOffExpense.processed.is_(False), OneOffExpense.processed.is_(None))
    )
    if user_id is not None:
        query = query.where(OneOffExpense.user_id == user_id)
    result = await db.execute(query.order_by(OneOffExpense.id))
    return list(result.scalars().all())

async def mark_processed(source: OneOffExpense, db: AsyncSession) -> OneOffExpense:
    source.processed = True
    db.add(source)
    await db.flush()
    return source
