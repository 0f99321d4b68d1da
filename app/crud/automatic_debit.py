# app/crud/automatic_debit.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.automatic_debit import AutomaticDebit
from typing import List, Optional

async def get_automatic_debit(source_id: int, db: AsyncSession) -> Optional[AutomaticDebit]:
    result = await db.execute(select(AutomaticDebit).where(AutomaticDebit.id == source_id))
    return result.scalar_one_or_none()

async def find_active_ids(db: AsyncSession, user_id: Optional[int] = None) -> List[int]:
    query = select(AutomaticDebit.id).where(AutomaticDebit.is_active.is_(True))
    if user_id is not None:
        query = query.where(AutomaticDebit.user_id == user_id)
    result = await db.execute(query.order_by(AutomaticDebit.id))
    return list(result.scalars().all())

async def find_active(db: AsyncSession) -> List[AutomaticDebit]:
    result = await db.execute(
        select(AutomaticDebit).where(AutomaticDebit.is_active.is_(True)).order_by(AutomaticDebit.id)
    )
    return result.unique().scalars().all()
