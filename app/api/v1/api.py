from fastapi import APIRouter

from app.api.v1.routes import exchange_rates, generation

api_router = APIRouter()

api_router.include_router(generation.router)
api_router.include_router(exchange_rates.router)
