# app/models/expense.py
import enum
from sqlalchemy import Column, String, ForeignKey, Numeric, Enum, Date, DateTime, Integer, Index, func
from app.core.database import Base

class OriginKind(str, enum.Enum):
    """Which source table a ledger entry was materialized from"""
    one_off = "one-off"
    recurring = "recurring"
    automatic_debit = "automatic-debit"
    installment = "installment-purchase"

class Currency(str, enum.Enum):
    ARS = "ARS"
    USD = "USD"

class Expense(Base):
    """
    A materialized ledger entry. Rows are only ever created by a generation
    strategy and are not updated afterwards.
    """
    __tablename__ = "expenses"
    __table_args__ = (
        Index("ix_expenses_origin", "origin_kind", "origin_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    date = Column(Date, nullable=False)
    description = Column(String(length=255), nullable=False)

    amount_ars = Column(Numeric(12, 2), nullable=True)
    amount_usd = Column(Numeric(12, 2), nullable=True)
    origin_currency = Column(Enum(Currency), nullable=False, default=Currency.ARS)
    # Snapshot of the rate used for the conversion
    exchange_rate_used = Column(Numeric(12, 2), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    importance_id = Column(Integer, ForeignKey("importances.id"), nullable=False)
    payment_type_id = Column(Integer, ForeignKey("payment_types.id"), nullable=False)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=True)
    frequency_id = Column(Integer, ForeignKey("frequencies.id"), nullable=True)

    total_installments = Column(Integer, nullable=True)
    paid_installments = Column(Integer, nullable=True)

    # Polymorphic pointer back to the source row; no database-level FK
    origin_kind = Column(Enum(OriginKind), nullable=False)
    origin_id = Column(Integer, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Expense {self.origin_kind}:{self.origin_id} date={self.date} amount_ars={self.amount_ars}>"
