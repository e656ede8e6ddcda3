"""Pytest configuration and fixtures for the order lookup test suite.

Provides:
- Settings factory (explicit values, never read from the environment)
- App/client factories wired with the pipeline for a given configuration
- Mock Redis (fakeredis) for rate-limit counters
- Mocks for the Shopify and reCAPTCHA HTTP clients
- Proxy signature helper and sample Shopify order nodes
"""

import hashlib
import hmac
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import fakeredis.aioredis
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from order_lookup.core.config import Settings
from order_lookup.integrations.recaptcha import RecaptchaClient
from order_lookup.integrations.shopify.client import ShopifyClient
from order_lookup.main import create_app
from order_lookup.services.lookup_service import build_lookup_service

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_SHOP = "test-store.myshopify.com"
TEST_ACCESS_TOKEN = "shpat_test_token"
TEST_ORIGIN = "https://test-store.myshopify.com"
OTHER_ALLOWED_ORIGIN = "https://shop.example.com"
EVIL_ORIGIN = "https://evil.example"
TEST_SIGNING_SECRET = "test-proxy-signing-secret"
TEST_RECAPTCHA_SECRET = "test-recaptcha-secret"
LOOKUP_URL = "/api/v1/orders/lookup"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings with test defaults; keyword arguments override fields."""

    def _create(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "environment": "development",
            "trust_mode": "cors",
            "allowed_origins": [TEST_ORIGIN, OTHER_ALLOWED_ORIGIN],
            "proxy_signing_secret": TEST_SIGNING_SECRET,
            "shopify_shop": TEST_SHOP,
            "shopify_admin_api_access_token": TEST_ACCESS_TOKEN,
            "recaptcha_secret": "",
            "rate_limit_redis_url": None,
            "sentry_dsn": "",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)  # type: ignore[call-arg]

    return _create


# ---------------------------------------------------------------------------
# Fake Redis
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Provide a fresh fakeredis instance per test."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


# ---------------------------------------------------------------------------
# App + clients
# ---------------------------------------------------------------------------


@pytest.fixture
def app_factory(
    settings_factory: Callable[..., Settings],
) -> Callable[..., FastAPI]:
    """Create an app for the given settings overrides.

    Pass ``redis=`` to back the rate limiter with a fake store; the real
    client is never created in tests.
    """

    def _create(*, redis: Any = None, **overrides: Any) -> FastAPI:
        settings = settings_factory(**overrides)
        app = create_app(settings)
        if redis is not None:
            app.state.lookup_service = build_lookup_service(settings, redis=redis)
        return app

    return _create


@pytest_asyncio.fixture
async def client_factory() -> AsyncGenerator[Callable[[FastAPI], AsyncClient], None]:
    """Open async test clients for arbitrary apps and close them afterwards."""
    clients: list[AsyncClient] = []

    def _create(app: FastAPI) -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _create

    for ac in clients:
        await ac.aclose()


@pytest_asyncio.fixture
async def cors_client(
    app_factory: Callable[..., FastAPI],
    client_factory: Callable[[FastAPI], AsyncClient],
) -> AsyncClient:
    """Client for a CORS-mode app with CAPTCHA and rate limiting disabled."""
    return client_factory(app_factory())


@pytest_asyncio.fixture
async def signed_client(
    app_factory: Callable[..., FastAPI],
    client_factory: Callable[[FastAPI], AsyncClient],
) -> AsyncClient:
    """Client for a signed-proxy-mode app with CAPTCHA and rate limiting disabled."""
    return client_factory(app_factory(trust_mode="signed_proxy"))


# ---------------------------------------------------------------------------
# Signing
# ---------------------------------------------------------------------------


@pytest.fixture
def proxy_signature() -> Callable[[dict[str, str]], str]:
    """Compute a proxy signature for single-valued params, independently of the app.

    Usage:
        params["signature"] = proxy_signature(params)
    """

    def _compute(params: dict[str, str]) -> str:
        message = "".join(f"{k}={v}" for k, v in sorted(params.items()) if k != "signature")
        return hmac.new(
            TEST_SIGNING_SECRET.encode(),
            message.encode(),
            hashlib.sha256,
        ).hexdigest()

    return _compute


# ---------------------------------------------------------------------------
# Outbound HTTP mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_shopify_http() -> Generator[AsyncMock, None, None]:
    """Mock httpx.AsyncClient for ShopifyClient unit tests.

    The default response is an empty order search.
    """
    with patch("order_lookup.integrations.shopify.client.httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__.return_value = mock_client

        mock_post_response = MagicMock()
        mock_post_response.json.return_value = {"data": {"orders": {"edges": []}}}
        mock_post_response.raise_for_status = MagicMock()
        mock_client.post.return_value = mock_post_response

        yield mock_client


@pytest.fixture
def mock_recaptcha_http() -> Generator[AsyncMock, None, None]:
    """Mock httpx.AsyncClient for RecaptchaClient unit tests."""
    with patch("order_lookup.integrations.recaptcha.httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__.return_value = mock_client

        mock_post_response = MagicMock()
        mock_post_response.json.return_value = {"success": True, "score": 0.9}
        mock_post_response.raise_for_status = MagicMock()
        mock_client.post.return_value = mock_post_response

        yield mock_client


@pytest.fixture
def mock_find_order() -> Generator[AsyncMock, None, None]:
    """Patch ShopifyClient.find_order for route and pipeline tests (default: no match)."""
    with patch.object(ShopifyClient, "find_order", new_callable=AsyncMock) as mock_fn:
        mock_fn.return_value = None
        yield mock_fn


@pytest.fixture
def mock_captcha_verify() -> Generator[AsyncMock, None, None]:
    """Patch RecaptchaClient.verify for route and pipeline tests."""
    with patch.object(RecaptchaClient, "verify", new_callable=AsyncMock) as mock_fn:
        yield mock_fn


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_order_node() -> dict[str, Any]:
    """A Shopify order node as returned by the Admin GraphQL order search."""
    return {
        "name": "#1001",
        "displayFulfillmentStatus": "IN_TRANSIT",
        "statusPageUrl": "https://test-store.myshopify.com/123/orders/abc/authenticate",
        "fulfillments": [
            {
                "trackingInfo": [
                    {
                        "number": "1Z999AA10123456784",
                        "url": "https://www.ups.com/track?tracknum=1Z999AA10123456784",
                        "company": "UPS",
                    },
                    {
                        "number": "1Z999AA10123456785",
                        "url": "https://www.ups.com/track?tracknum=1Z999AA10123456785",
                        "company": "UPS",
                    },
                ]
            },
            {
                "trackingInfo": [
                    {
                        "number": "9400111899223197428490",
                        "url": "https://tools.usps.com/go/TrackConfirmAction?tLabels=9400111899223197428490",
                        "company": "USPS",
                    },
                ]
            },
        ],
    }
