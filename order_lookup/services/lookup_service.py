"""Order lookup pipeline: trust, throttle, validate, verify, query, project."""

import logging

import redis.asyncio as aioredis

from order_lookup.core.config import Settings
from order_lookup.core.errors import ConfigurationFailure, ValidationFailure
from order_lookup.core.rate_limit import LOOPBACK_IP, RateLimiter
from order_lookup.core.request import InboundRequest
from order_lookup.core.trust import TrustStrategy, build_trust_strategy
from order_lookup.integrations.recaptcha import CaptchaVerifier, RecaptchaClient
from order_lookup.integrations.shopify.client import ShopifyClient
from order_lookup.schemas.order import OrderLookupResponse
from order_lookup.services.projector import project_order
from order_lookup.services.query_builder import build_lookup_query

logger = logging.getLogger(__name__)


def validate_input(inbound: InboundRequest) -> tuple[str, str]:
    """Require order and email to be present once trimmed.

    Returns:
        The trimmed ``(order, email)`` pair.
    """
    order = inbound.order.strip()
    email = inbound.email.strip()
    if not order or not email:
        raise ValidationFailure("Missing order or email")
    return order, email


class OrderLookupService:
    """Runs one lookup request through every stage.

    Each stage either passes or raises an OrderLookupError; nothing is retried.
    """

    def __init__(
        self,
        trust: TrustStrategy,
        captcha: CaptchaVerifier,
        backend: ShopifyClient | None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.trust = trust
        self.captcha = captcha
        self.backend = backend
        self.rate_limiter = rate_limiter

    async def lookup(self, inbound: InboundRequest) -> OrderLookupResponse:
        """Look up an order on behalf of an untrusted caller.

        Args:
            inbound: The request as received.

        Returns:
            The projected result; a miss is ``found=False``, not an error.
        """
        identity = self.trust.verify(inbound)

        if self.rate_limiter is not None:
            await self.rate_limiter.hit(inbound.client_ip)

        order, email = validate_input(inbound)

        if self.backend is None:
            logger.error("Shopify shop or access token is not configured")
            raise ConfigurationFailure()

        remote_ip = None if inbound.client_ip == LOOPBACK_IP else inbound.client_ip
        await self.captcha.check(inbound.captcha_token, remote_ip)

        query = build_lookup_query(order, email)
        node = await self.backend.find_order(query.filter_expression)
        result = project_order(node)

        logger.info(
            "Order lookup completed",
            extra={"tenant": identity.tenant, "found": result.found},
        )
        return result


def build_lookup_service(
    settings: Settings,
    redis: aioredis.Redis | None = None,
) -> OrderLookupService:
    """Wire the pipeline from configuration.

    Args:
        settings: Process configuration.
        redis: Counter store override; defaults to ``rate_limit_redis_url``.
    """
    backend = None
    if settings.backend_configured:
        backend = ShopifyClient(
            settings.shopify_shop,
            settings.shopify_admin_api_access_token,
            settings.shopify_api_version,
            timeout=settings.http_timeout_seconds,
        )

    recaptcha = None
    if settings.captcha_enabled:
        recaptcha = RecaptchaClient(
            settings.recaptcha_secret,
            settings.recaptcha_verify_url,
            timeout=settings.http_timeout_seconds,
        )

    if redis is None and settings.rate_limit_redis_url is not None:
        redis = aioredis.Redis.from_url(
            str(settings.rate_limit_redis_url),
            decode_responses=True,
            socket_timeout=settings.http_timeout_seconds,
        )

    rate_limiter = None
    if redis is not None:
        rate_limiter = RateLimiter(
            redis,
            settings.rate_limit_requests,
            settings.rate_limit_window_seconds,
        )

    return OrderLookupService(
        trust=build_trust_strategy(settings),
        captcha=CaptchaVerifier(recaptcha, settings.recaptcha_min_score),
        backend=backend,
        rate_limiter=rate_limiter,
    )
