"""Caller trust strategies: browser origin allowlist or signed proxy."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from order_lookup.core.config import Settings
from order_lookup.core.errors import AuthenticationFailure, AuthorizationFailure
from order_lookup.core.request import InboundRequest
from order_lookup.core.security import verify_signature

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, X-Requested-With"


@dataclass(frozen=True)
class VerifiedIdentity:
    """Outcome of a successful trust check."""

    tenant: str | None = None


class TrustStrategy(Protocol):
    """Decides whether a caller may use the lookup at all."""

    def verify(self, inbound: InboundRequest) -> VerifiedIdentity:
        """Return the verified identity or raise an OrderLookupError."""
        ...

    def response_headers(self, origin: str) -> dict[str, str]:
        """Headers to attach to every response for this caller."""
        ...


class OriginStrategy:
    """Exact-match Origin allowlist for browser (CORS) callers."""

    def __init__(self, allowed_origins: Iterable[str]) -> None:
        self.allowed_origins = frozenset(allowed_origins)

    def is_allowed(self, origin: str) -> bool:
        return bool(origin) and origin in self.allowed_origins

    def verify(self, inbound: InboundRequest) -> VerifiedIdentity:
        if not self.is_allowed(inbound.origin):
            logger.warning("Rejected origin %r", inbound.origin)
            raise AuthorizationFailure("Origin not allowed")
        return VerifiedIdentity()

    def response_headers(self, origin: str) -> dict[str, str]:
        # Vary on every response, allowed origin or not
        headers = {
            "Vary": "Origin",
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }
        if self.is_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin
        return headers


class SignatureStrategy:
    """Requests relayed by a front-door proxy that signs the query string."""

    def __init__(self, secret: str, trusted_shop: str) -> None:
        self.secret = secret
        self.trusted_shop = trusted_shop

    def verify(self, inbound: InboundRequest) -> VerifiedIdentity:
        if not verify_signature(inbound.params, inbound.signature, self.secret):
            logger.warning("Rejected request with invalid proxy signature")
            raise AuthenticationFailure("Invalid signature")

        if not self.trusted_shop or inbound.shop != self.trusted_shop:
            logger.warning("Rejected signed request for shop %r", inbound.shop)
            raise AuthorizationFailure("Shop not allowed")

        return VerifiedIdentity(tenant=inbound.shop)

    def response_headers(self, origin: str) -> dict[str, str]:  # noqa: ARG002
        return {}


def build_trust_strategy(settings: Settings) -> TrustStrategy:
    """Select the trust strategy for this deployment."""
    if settings.trust_mode == "signed_proxy":
        return SignatureStrategy(settings.proxy_signing_secret, settings.shopify_shop)
    return OriginStrategy(settings.allowed_origins)
