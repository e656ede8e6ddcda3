"""Order lookup gateway in front of the Shopify Admin API."""
