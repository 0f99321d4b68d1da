# app/models/one_off.py
from sqlalchemy import Column, String, ForeignKey, Numeric, Boolean, Enum, Date, DateTime, Integer, func
from app.core.database import Base
from app.models.expense import Currency

class OneOffExpense(Base):
    __tablename__ = "one_off_expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    description = Column(String(length=255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    origin_currency = Column(Enum(Currency), nullable=False, default=Currency.ARS)
    # Rate agreed when the expense was registered; falls back to the current rate when empty
    reference_rate = Column(Numeric(12, 2), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    importance_id = Column(Integer, ForeignKey("importances.id"), nullable=True)
    payment_type_id = Column(Integer, ForeignKey("payment_types.id"), nullable=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=True)

    # Flips to True exactly once, in the transaction that creates the ledger entry
    processed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<OneOffExpense description={self.description} amount={self.amount} processed={self.processed}>"
