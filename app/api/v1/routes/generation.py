# app/api/v1/routes/generation.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import error_headers, get_generator
from app.core.exceptions import ExchangeRateError, GenerationError
from app.schemas.generation import GenerationResult, OneOffGenerationResult
from app.services.expense_generator import ExpenseGeneratorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generation", tags=["Generation"])


@router.post("/run", response_model=GenerationResult)
async def run_generation(
    user_id: Optional[int] = Query(None, description="Only generate sources of this user"),
    generator: ExpenseGeneratorService = Depends(get_generator),
):
    """
    Materialize every due source into the ledger.

    Always answers 200 when the run completes; inspect ``errors`` for
    sources that could not be generated.
    """
    return await generator.generate_all_pending(user_id=user_id)


@router.post("/one-off/{source_id}", response_model=OneOffGenerationResult)
async def generate_one_off(
    source_id: int,
    generator: ExpenseGeneratorService = Depends(get_generator),
):
    """Materialize a single one-off expense immediately."""
    try:
        entry = await generator.generate_from_one_off(source_id)
    except (GenerationError, ExchangeRateError) as e:
        logger.error(f"One-off {source_id} could not be generated: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message, headers=error_headers(e))

    if entry is None:
        return OneOffGenerationResult(source_id=source_id)
    return OneOffGenerationResult(source_id=source_id, ledger_entry_id=entry.id, date=entry.date)
