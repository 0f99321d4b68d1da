# app/schemas/exchange_rate.py
from typing import Optional
from pydantic import BaseModel, Field, model_validator
import datetime
from decimal import Decimal
from app.models.exchange_rate import RateSource
from app.models.expense import Currency

class ExchangeRateBase(BaseModel):
    date: datetime.date
    buy_rate: Decimal = Field(..., gt=0, description="ARS paid per 1 USD when buying")
    sell_rate: Decimal = Field(..., gt=0, description="ARS received per 1 USD when selling")
    notes: Optional[str] = Field(None, max_length=500)

class ExchangeRateCreate(ExchangeRateBase):
    @model_validator(mode="after")
    def check_sell_gte_buy(self):
        if self.sell_rate < self.buy_rate:
            raise ValueError("sell_rate must be greater than or equal to buy_rate")
        return self

class ExchangeRateRead(ExchangeRateBase):
    id: int
    source: RateSource
    is_active: bool
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True

class ConversionRequest(BaseModel):
    amount: Decimal = Field(..., ge=0)
    origin_currency: Currency
    date: Optional[datetime.date] = Field(None, description="Use the rate of this day instead of the current one")

class ConversionResponse(BaseModel):
    amount_ars: Decimal
    amount_usd: Decimal
    rate_used: Decimal
    rate_date: Optional[datetime.date] = None

    class Config:
        from_attributes = True
