"""Map a Shopify order node onto the public lookup contract."""

from typing import Any

from order_lookup.schemas.order import OrderLookupResponse, TrackingEntry

UNKNOWN_STATUS = "UNKNOWN"


def capitalize_words(text: str) -> str:
    """Uppercase the first character of each whitespace-separated word.

    Runs of whitespace collapse to a single space.
    """
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


def format_display_status(value: str | None) -> str:
    """Turn an enum value like ``IN_TRANSIT`` into ``In Transit``."""
    raw = value or UNKNOWN_STATUS
    return capitalize_words(raw.replace("_", " ").lower())


def flatten_tracking(fulfillments: list[dict[str, Any]] | None) -> list[TrackingEntry]:
    """Concatenate every fulfillment's tracking entries, keeping their order."""
    entries: list[TrackingEntry] = []
    for fulfillment in fulfillments or []:
        for info in fulfillment.get("trackingInfo") or []:
            entries.append(
                TrackingEntry(
                    number=info.get("number"),
                    url=info.get("url"),
                    company=info.get("company"),
                )
            )
    return entries


def project_order(node: dict[str, Any] | None) -> OrderLookupResponse:
    """Build the response for a backend match, or a plain miss."""
    if not node:
        return OrderLookupResponse(found=False)

    return OrderLookupResponse(
        found=True,
        order_name=node.get("name"),
        display_status=format_display_status(node.get("displayFulfillmentStatus")),
        status_page_url=node.get("statusPageUrl") or None,
        tracking=flatten_tracking(node.get("fulfillments")),
    )
