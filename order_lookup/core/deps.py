"""Dependency injection for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, Request

from order_lookup.core.config import Settings
from order_lookup.services.lookup_service import OrderLookupService


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    settings: Settings = request.app.state.settings
    return settings


def get_lookup_service(request: Request) -> OrderLookupService:
    """The pipeline wired once in ``create_app``."""
    service: OrderLookupService = request.app.state.lookup_service
    return service


AppSettings = Annotated[Settings, Depends(get_app_settings)]
LookupService = Annotated[OrderLookupService, Depends(get_lookup_service)]


__all__ = [
    "AppSettings",
    "LookupService",
    "get_app_settings",
    "get_lookup_service",
]
