# app/models/exchange_rate.py
import enum
from sqlalchemy import Column, String, Numeric, Boolean, Enum, Date, DateTime, Integer, CheckConstraint, func
from app.core.database import Base

class RateSource(str, enum.Enum):
    manual = "manual"
    api_dolar_api = "api_dolar_api"
    api_bcra = "api_bcra"
    api_other = "api_other"

class ExchangeRate(Base):
    """ARS per 1 USD for a given day. The newest active row is the current rate."""
    __tablename__ = "exchange_rates"
    __table_args__ = (
        CheckConstraint("sell_rate >= buy_rate", name="ck_exchange_rates_sell_gte_buy"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True, index=True)
    buy_rate = Column(Numeric(12, 2), nullable=False)
    sell_rate = Column(Numeric(12, 2), nullable=False)
    source = Column(Enum(RateSource), nullable=False, default=RateSource.manual)
    notes = Column(String(length=500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ExchangeRate date={self.date} buy={self.buy_rate} sell={self.sell_rate} source={self.source}>"
