# app/crud/catalog.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.catalog import Category, Importance, PaymentType
from typing import Any, List, Type

# Foreign keys every generated ledger entry must carry, mapped to the catalog they point at
REQUIRED_REFERENCES = {
    "category_id": Category,
    "importance_id": Importance,
    "payment_type_id": PaymentType,
}

async def _exists(model: Type[Any], row_id: int, db: AsyncSession) -> bool:
    result = await db.execute(select(model.id).where(model.id == row_id))
    return result.scalar_one_or_none() is not None

async def find_missing_references(source: Any, db: AsyncSession) -> List[str]:
    """Names of required foreign keys on ``source`` that are unset or point at nothing."""
    missing = []
    for field, model in REQUIRED_REFERENCES.items():
        value = getattr(source, field, None)
        if value is None or not await _exists(model, value, db):
            missing.append(field)
    return missing

async def get_or_create_by_name(model: Type[Any], name: str, db: AsyncSession) -> Any:
    result = await db.execute(select(model).where(model.name == name))
    row = result.scalar_one_or_none()
    if row is None:
        row = model(name=name)
        db.add(row)
        await db.flush()
    return row
