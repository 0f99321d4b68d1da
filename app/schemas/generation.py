# app/schemas/generation.py
from typing import Dict, List, Optional
from pydantic import BaseModel
import datetime

class GeneratedEntry(BaseModel):
    kind: str
    ledger_entry_id: int
    source_id: int

class GenerationError(BaseModel):
    kind: str
    source_id: int
    error_message: str

class KindSummary(BaseModel):
    processed: int = 0
    generated: int = 0
    skipped: int = 0
    errors: int = 0

class GenerationResult(BaseModel):
    success: List[GeneratedEntry]
    errors: List[GenerationError]
    summary: Dict[str, KindSummary]
    processing_time_ms: int

class OneOffGenerationResult(BaseModel):
    source_id: int
    ledger_entry_id: Optional[int] = None
    date: Optional[datetime.date] = None
