"""Public order lookup endpoint."""

from fastapi import APIRouter, Request, Response, status

from order_lookup.core.deps import LookupService
from order_lookup.core.logging_config import client_ip_var
from order_lookup.core.request import InboundRequest
from order_lookup.schemas.common import ErrorResponse
from order_lookup.schemas.order import OrderLookupResponse

router = APIRouter()


@router.options("/lookup", status_code=status.HTTP_204_NO_CONTENT)
async def lookup_preflight(request: Request, service: LookupService) -> Response:
    """CORS preflight; answers without running the pipeline."""
    headers = service.trust.response_headers(request.headers.get("Origin", ""))
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)


@router.api_route(
    "/lookup",
    methods=["GET", "POST"],
    response_model=OrderLookupResponse,
    response_model_exclude_unset=True,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def lookup_order(
    request: Request,
    response: Response,
    service: LookupService,
) -> OrderLookupResponse:
    """Look up an order by number and email.

    Query parameters: ``order``, ``email``, optional ``captchaToken``, and in
    signed-proxy mode the proxy's ``shop``/``signature`` parameters.
    """
    inbound = InboundRequest.from_request(request)
    client_ip_var.set(inbound.client_ip)

    # Picked up by the error handler too, so failures carry the same CORS headers
    headers = service.trust.response_headers(inbound.origin)
    request.state.response_headers = headers

    result = await service.lookup(inbound)
    response.headers.update(headers)
    return result
