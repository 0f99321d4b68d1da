# app/core/exceptions.py
"""
Typed errors raised by the expense generation engine and the exchange rate service.

    GastosError
    +-- GenerationError
    |   +-- InvalidSourceError
    |   +-- MissingForeignKeyError
    +-- ExchangeRateError
        +-- InvalidRateError
        +-- NoRateConfiguredError
        +-- InvalidCurrencyError

Generation errors are caught per candidate by the orchestrator and reported in
the run's ``errors`` list. Exchange rate errors raised while generating follow
the same path; raised from a route they become 400/404 responses.
"""
from typing import Iterable, Optional


class GastosError(Exception):
    """Base class for every domain error in this service."""

    code: str = "GASTOS_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ------------------------------------------------------------
# GENERATION
# ------------------------------------------------------------
class GenerationError(GastosError):
    code: str = "GENERATION_ERROR"

    def __init__(self, message: str, origin_kind: Optional[str] = None, source_id: Optional[int] = None):
        self.origin_kind = origin_kind
        self.source_id = source_id
        super().__init__(message)


class InvalidSourceError(GenerationError):
    """A source row lacks the fields required to build a ledger entry."""

    code: str = "INVALID_SOURCE"

    def __init__(self, origin_kind: str, source_id: Optional[int]):
        super().__init__(
            f"{origin_kind} source {source_id} is missing required fields for generation",
            origin_kind=origin_kind,
            source_id=source_id,
        )


class MissingForeignKeyError(GenerationError):
    """A source row references a catalog row that is unset or does not exist."""

    code: str = "MISSING_FOREIGN_KEY"

    def __init__(self, origin_kind: str, source_id: Optional[int], missing_keys: Iterable[str]):
        self.missing_keys = list(missing_keys)
        super().__init__(
            f"Missing required foreign keys: {', '.join(self.missing_keys)}",
            origin_kind=origin_kind,
            source_id=source_id,
        )


# ------------------------------------------------------------
# EXCHANGE RATES
# ------------------------------------------------------------
class ExchangeRateError(GastosError):
    code: str = "EXCHANGE_RATE_ERROR"


class InvalidRateError(ExchangeRateError):
    code: str = "INVALID_RATE"


class NoRateConfiguredError(ExchangeRateError):
    code: str = "NO_EXCHANGE_RATE"

    def __init__(self, message: str = "No exchange rate is configured"):
        super().__init__(message)


class InvalidCurrencyError(ExchangeRateError):
    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Unsupported origin currency: '{currency}'")
