# app/api/deps.py
from typing import Dict

from fastapi import Request

from app.core.exceptions import GastosError

from app.services.exchange_rates import ExchangeRateService
from app.services.expense_generator import ExpenseGeneratorService

# Long-lived services are created once at startup and stored on app.state


def get_exchange_rate_service(request: Request) -> ExchangeRateService:
    return request.app.state.exchange_rate_service


def get_generator(request: Request) -> ExpenseGeneratorService:
    return request.app.state.generator


ERROR_CODE_HEADER = "X-Error-Code"


def error_headers(exc: GastosError) -> Dict[str, str]:
    """Carries the domain error code through ``HTTPException`` to the response."""
    return {ERROR_CODE_HEADER: exc.code}
