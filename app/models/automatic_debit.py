# app/models/automatic_debit.py
from sqlalchemy import Column, String, ForeignKey, Numeric, Boolean, Enum, Date, DateTime, Integer, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.expense import Currency
from app.models.catalog import Frequency

class AutomaticDebit(Base):
    """Same shape as a recurring expense; end_date is a permanent stop."""
    __tablename__ = "automatic_debits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    description = Column(String(length=255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    origin_currency = Column(Enum(Currency), nullable=False, default=Currency.ARS)
    amount_ars = Column(Numeric(12, 2), nullable=True)
    amount_usd = Column(Numeric(12, 2), nullable=True)
    reference_rate = Column(Numeric(12, 2), nullable=True)

    payment_day = Column(Integer, nullable=False)
    payment_month = Column(Integer, nullable=True)
    frequency_id = Column(Integer, ForeignKey("frequencies.id"), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    importance_id = Column(Integer, ForeignKey("importances.id"), nullable=True)
    payment_type_id = Column(Integer, ForeignKey("payment_types.id"), nullable=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    last_generated_date = Column(Date, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    frequency = relationship(Frequency, lazy="joined")

    def __repr__(self):
        return f"<AutomaticDebit description={self.description} day={self.payment_day} end={self.end_date}>"
