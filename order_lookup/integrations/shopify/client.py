"""Shopify Admin GraphQL client using httpx."""

import logging
from typing import Any

import httpx

from order_lookup.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)

ORDER_LOOKUP_QUERY = """
query ($q: String!) {
  orders(first: 1, query: $q) {
    edges {
      node {
        name
        displayFulfillmentStatus
        statusPageUrl
        fulfillments(first: 10) {
          trackingInfo { number url company }
        }
      }
    }
  }
}
"""


class ShopifyClient:
    """Async client for the Shopify Admin GraphQL API."""

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str,
        timeout: float = 10.0,
    ) -> None:
        self.shop_domain = shop_domain
        self.endpoint = f"https://{shop_domain}/admin/api/{api_version}/graphql.json"
        self.timeout = timeout
        self.headers = {
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        }

    async def find_order(self, query: str) -> dict[str, Any] | None:
        """Find at most one order matching a search filter.

        Args:
            query: Shopify search syntax, e.g. ``email:'a@b.co' AND name:'1001'``.

        Returns:
            The order node, or None when nothing matched.

        Raises:
            UpstreamFailure: On transport errors, HTTP errors, or GraphQL errors.
        """
        payload = {"query": ORDER_LOOKUP_QUERY, "variables": {"q": query}}

        try:
            async with httpx.AsyncClient(headers=self.headers, timeout=self.timeout) as client:
                response = await client.post(self.endpoint, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Shopify order query failed for %s: %s",
                self.shop_domain,
                exc.response.status_code,
            )
            raise UpstreamFailure() from exc
        except httpx.HTTPError as exc:
            logger.error("Shopify unreachable for %s: %s", self.shop_domain, exc)
            raise UpstreamFailure() from exc
        except ValueError as exc:
            logger.error("Shopify returned a non-JSON body for %s", self.shop_domain)
            raise UpstreamFailure() from exc

        if not isinstance(data, dict):
            raise UpstreamFailure()

        if data.get("errors"):
            logger.error("Shopify GraphQL errors for %s: %s", self.shop_domain, data["errors"])
            raise UpstreamFailure()

        edges = ((data.get("data") or {}).get("orders") or {}).get("edges") or []
        if not edges:
            return None

        node: dict[str, Any] | None = edges[0].get("node")
        return node
