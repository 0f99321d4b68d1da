# app/crud/purchase.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.purchase import Purchase
from typing import List, Optional

async def get_purchase(source_id: int, db: AsyncSession) -> Optional[Purchase]:
    result = await db.execute(select(Purchase).where(Purchase.id == source_id))
    return result.scalar_one_or_none()

async def find_pending_installment_ids(db: AsyncSession, user_id: Optional[int] = None) -> List[int]:
    query = select(Purchase.id).where(Purchase.pending_installments.is_(True))
    if user_id is not None:
        query = query.where(Purchase.user_id == user_id)
    result = await db.execute(query.order_by(Purchase.id))
    return list(result.scalars().all())

async def clear_pending(purchase: Purchase, db: AsyncSession) -> Purchase:
    purchase.pending_installments = False
    db.add(purchase)
    await db.flush()
    return purchase
