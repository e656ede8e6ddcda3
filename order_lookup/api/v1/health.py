"""Health check endpoints."""

from fastapi import APIRouter, Response, status
from redis.exceptions import RedisError

from order_lookup.core.deps import AppSettings, LookupService
from order_lookup.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: AppSettings,
    service: LookupService,
    response: Response,
) -> HealthResponse:
    """
    Health check endpoint.

    Reports whether the backend is configured and, when rate limiting is
    enabled, whether the counter store answers.
    """
    checks: dict[str, str] = {
        "shopify": "configured" if service.backend is not None else "not configured",
        "captcha": "enabled" if service.captcha.enabled else "disabled",
    }
    healthy = service.backend is not None

    if service.rate_limiter is None:
        checks["rate_limit"] = "disabled"
    else:
        try:
            await service.rate_limiter.redis.ping()
            checks["rate_limit"] = "healthy"
        except RedisError:
            checks["rate_limit"] = "unhealthy"
            healthy = False

    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.version,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness probe for Kubernetes/container orchestration.

    Simple check that the service is running.
    """
    return {"status": "alive"}
