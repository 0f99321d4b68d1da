# app/models/purchase.py
from sqlalchemy import Column, String, ForeignKey, Numeric, Boolean, Enum, Date, DateTime, Integer, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.expense import Currency
from app.models.card import Card

class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    description = Column(String(length=255), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    installment_count = Column(Integer, nullable=False, default=1)   # 1-60
    purchase_date = Column(Date, nullable=False)
    origin_currency = Column(Enum(Currency), nullable=False, default=Currency.ARS)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    importance_id = Column(Integer, ForeignKey("importances.id"), nullable=True)
    payment_type_id = Column(Integer, ForeignKey("payment_types.id"), nullable=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=True)

    # Cleared together with the ledger entry of the final installment
    pending_installments = Column(Boolean, nullable=False, default=True)
    last_installment_date = Column(Date, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    card = relationship(Card, lazy="joined")

    def __repr__(self):
        return f"<Purchase description={self.description} total={self.total_amount} installments={self.installment_count}>"
