"""Inbound lookup request, captured once from the HTTP layer."""

from dataclasses import dataclass

from starlette.requests import Request

from order_lookup.core.rate_limit import get_client_ip
from order_lookup.core.security import SIGNATURE_PARAM


@dataclass(frozen=True)
class InboundRequest:
    """Raw, untrusted lookup parameters plus the transport facts we need."""

    order: str
    email: str
    captcha_token: str
    signature: str
    shop: str
    origin: str
    client_ip: str
    # Every query parameter in arrival order, repeats included
    params: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_request(cls, request: Request) -> "InboundRequest":
        query = request.query_params
        return cls(
            order=query.get("order", ""),
            email=query.get("email", ""),
            captcha_token=query.get("captchaToken", ""),
            signature=query.get(SIGNATURE_PARAM, ""),
            shop=query.get("shop", ""),
            origin=request.headers.get("Origin", ""),
            client_ip=get_client_ip(request),
            params=tuple(query.multi_items()),
        )
