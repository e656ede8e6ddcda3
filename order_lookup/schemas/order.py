"""Public order lookup contract."""

from order_lookup.schemas.common import BaseSchema


class TrackingEntry(BaseSchema):
    """One shipment tracking reference."""

    number: str | None = None
    url: str | None = None
    company: str | None = None


class OrderLookupResponse(BaseSchema):
    """Lookup result.

    A miss is just ``{"found": false}``; serialize with ``exclude_unset`` so
    the order fields only appear when they were populated.
    """

    found: bool
    order_name: str | None = None
    display_status: str | None = None
    status_page_url: str | None = None
    tracking: list[TrackingEntry] | None = None
