# app/models/catalog.py
from sqlalchemy import Column, Integer, String
from app.core.database import Base

# Lookup tables referenced by every source row and ledger entry.

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(length=100), nullable=False, unique=True)

    def __repr__(self):
        return f"<Category name={self.name}>"

class Importance(Base):
    __tablename__ = "importances"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(length=100), nullable=False, unique=True)

    def __repr__(self):
        return f"<Importance name={self.name}>"

class PaymentType(Base):
    __tablename__ = "payment_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(length=100), nullable=False, unique=True)

    def __repr__(self):
        return f"<PaymentType name={self.name}>"

class Frequency(Base):
    __tablename__ = "frequencies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Matches a key of the interval table in app/utils/frequency.py (weekly, monthly, ...)
    name = Column(String(length=50), nullable=False, unique=True)

    def __repr__(self):
        return f"<Frequency name={self.name}>"
