# app/api/v1/routes/exchange_rates.py
import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import error_headers, get_exchange_rate_service
from app.core.database import get_async_session
from app.core.exceptions import ExchangeRateError, NoRateConfiguredError
from app.schemas.exchange_rate import (
    ConversionRequest,
    ConversionResponse,
    ExchangeRateCreate,
    ExchangeRateRead,
)
from app.services.exchange_rates import ExchangeRateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exchange-rates", tags=["Exchange Rates"])


def _to_http(exc: ExchangeRateError) -> HTTPException:
    if isinstance(exc, NoRateConfiguredError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message, headers=error_headers(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message, headers=error_headers(exc))


@router.get("/current", response_model=ExchangeRateRead)
async def get_current_rate(
    db: AsyncSession = Depends(get_async_session),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    try:
        return await service.get_current_rate(db)
    except ExchangeRateError as e:
        raise _to_http(e)


@router.get("/history", response_model=List[ExchangeRateRead])
async def get_rate_history(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    limit: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_async_session),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    return await service.get_history(db, date_from=date_from, date_to=date_to, limit=limit)


@router.post("", response_model=ExchangeRateRead, status_code=status.HTTP_201_CREATED)
async def set_manual_rate(
    rate_in: ExchangeRateCreate,
    db: AsyncSession = Depends(get_async_session),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    """Create or replace the rate of a given day."""
    try:
        rate = await service.set_manual_rate(db, rate_in.date, rate_in.buy_rate, rate_in.sell_rate, notes=rate_in.notes)
        await db.commit()
    except ExchangeRateError as e:
        await db.rollback()
        raise _to_http(e)
    return rate


@router.post("/refresh", response_model=ExchangeRateRead)
async def refresh_rate(
    source: Literal["auto", "dolarapi", "bcra"] = Query("auto", description="Feed to pull from; auto falls back to BCRA"),
    db: AsyncSession = Depends(get_async_session),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    """Pull today's rate from an external feed."""
    rate = await service.refresh_from_api(db, source=source)
    if rate is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Exchange rate feed unavailable; the last stored rate is still in use",
        )
    await db.commit()
    return rate


@router.post("/convert", response_model=ConversionResponse)
async def convert_amount(
    request: ConversionRequest,
    db: AsyncSession = Depends(get_async_session),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    try:
        rate = None
        if request.date:
            rate = await service.get_rate_for_date(db, request.date)
        return await service.calculate_both_amounts(request.amount, request.origin_currency, db=db, rate=rate)
    except ExchangeRateError as e:
        raise _to_http(e)


@router.get("/{rate_date}", response_model=ExchangeRateRead)
async def get_rate_for_date(
    rate_date: date,
    db: AsyncSession = Depends(get_async_session),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
):
    """Rate of ``rate_date``, or the closest earlier one."""
    try:
        return await service.get_rate_for_date(db, rate_date)
    except ExchangeRateError as e:
        raise _to_http(e)
