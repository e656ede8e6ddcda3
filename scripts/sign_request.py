"""Proxy signing helper for exercising signed-proxy mode by hand.

Reads a query string from the first argument (or stdin) and prints the same
query string with a ``signature`` parameter appended, computed with the
PROXY_SIGNING_SECRET from the environment (or .env file).

Usage:
    uv run python -m scripts.sign_request 'shop=my-shop.myshopify.com&order=%231001&email=a@b.co'

    # Full curl example:
    QS=$(uv run python -m scripts.sign_request "shop=$SHOPIFY_SHOP&order=1001&email=a@b.co")
    curl "http://localhost:8000/api/v1/orders/lookup?$QS"
"""

import sys
from urllib.parse import parse_qsl, urlencode

from order_lookup.core.config import get_settings
from order_lookup.core.security import SIGNATURE_PARAM, compute_signature


def sign(query_string: str, secret: str) -> str:
    """Return ``query_string`` with its proxy signature appended."""
    params = [
        (key, value)
        for key, value in parse_qsl(query_string, keep_blank_values=True)
        if key != SIGNATURE_PARAM
    ]
    signature = compute_signature(params, secret)
    return urlencode([*params, (SIGNATURE_PARAM, signature)])


def main() -> None:
    secret = get_settings().proxy_signing_secret
    if not secret:
        print("ERROR: PROXY_SIGNING_SECRET is not set in .env", file=sys.stderr)
        sys.exit(1)

    query_string = sys.argv[1] if len(sys.argv) > 1 else sys.stdin.read().strip()
    if not query_string:
        print("ERROR: No query string given", file=sys.stderr)
        sys.exit(1)

    print(sign(query_string, secret), end="")


if __name__ == "__main__":
    main()
