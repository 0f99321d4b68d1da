# app/crud/exchange_rate.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.exchange_rate import ExchangeRate
from typing import Any, Dict, List, Optional
import datetime

async def get_latest_active(db: AsyncSession) -> Optional[ExchangeRate]:
    result = await db.execute(
        select(ExchangeRate)
        .where(ExchangeRate.is_active.is_(True))
        .order_by(ExchangeRate.date.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()

async def get_by_date(rate_date: datetime.date, db: AsyncSession) -> Optional[ExchangeRate]:
    result = await db.execute(
        select(ExchangeRate).where(ExchangeRate.date == rate_date, ExchangeRate.is_active.is_(True))
    )
    return result.scalar_one_or_none()

async def get_closest_before(rate_date: datetime.date, db: AsyncSession) -> Optional[ExchangeRate]:
    result = await db.execute(
        select(ExchangeRate)
        .where(ExchangeRate.date <= rate_date, ExchangeRate.is_active.is_(True))
        .order_by(ExchangeRate.date.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()

async def list_rates(
    db: AsyncSession,
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
    limit: int = 30,
) -> List[ExchangeRate]:
    query = select(ExchangeRate).where(ExchangeRate.is_active.is_(True))
    if start_date:
        query = query.where(ExchangeRate.date >= start_date)
    if end_date:
        query = query.where(ExchangeRate.date <= end_date)
    result = await db.execute(query.order_by(ExchangeRate.date.desc()).limit(limit))
    return result.scalars().all()

async def upsert_rate(rate_date: datetime.date, values: Dict[str, Any], db: AsyncSession) -> ExchangeRate:
    """Update the row for ``rate_date`` in place, or insert it. Inactive rows are reactivated."""
    result = await db.execute(select(ExchangeRate).where(ExchangeRate.date == rate_date))
    rate = result.scalar_one_or_none()
    if rate is None:
        rate = ExchangeRate(date=rate_date, **values)
    else:
        for field, value in values.items():
            setattr(rate, field, value)
    rate.is_active = True
    db.add(rate)
    await db.flush()
    await db.refresh(rate)
    return rate
