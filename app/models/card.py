# app/models/card.py
import enum
from sqlalchemy import Column, Integer, String, Enum
from app.core.database import Base

class CardType(str, enum.Enum):
    debit = "debit"
    credit = "credit"
    virtual = "virtual"

class Card(Base):
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(length=100), nullable=False)
    bank = Column(String(length=100), nullable=True)
    card_type = Column(Enum(CardType), nullable=False, default=CardType.debit)
    # Billing cycle, only meaningful for credit cards (1-31)
    closing_day = Column(Integer, nullable=True)
    due_day = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<Card name={self.name} type={self.card_type} user_id={self.user_id}>"
