"""API v1 router combining all route modules."""

from fastapi import APIRouter

from order_lookup.api.v1 import health, orders

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Public order lookup (trust enforced per request by the configured strategy)
api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["orders"],
)
