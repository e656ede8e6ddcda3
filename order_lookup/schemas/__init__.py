"""Pydantic schemas for request/response validation."""

from order_lookup.schemas.common import ErrorResponse, HealthResponse
from order_lookup.schemas.order import OrderLookupResponse, TrackingEntry

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "OrderLookupResponse",
    "TrackingEntry",
]
