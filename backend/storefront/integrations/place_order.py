"""HTTP client for the order placement service."""
import logging

import httpx

from storefront.application.checkout.collaborators import OrderReceipt, OrderRequest
from storefront.domain.invariants.exceptions import OrderSubmissionError

logger = logging.getLogger(__name__)


def build_payload(request: OrderRequest) -> dict:
    payload = {
        "items": [
            {
                "productId": line.product_id,
                "variationId": line.variant_id,
                "quantity": line.quantity,
                "productName": line.name,
                "price": line.unit_price,
            }
            for line in request.lines
        ],
        "shipping": request.contact.to_dict(),
        "shippingZone": request.zone.value,
        "orderSource": request.source,
    }
    if request.notes:
        payload["notes"] = request.notes
    payload.update(request.extras)
    return payload


class PlaceOrderClient:
    def __init__(self, url: str, api_key: str = "", *, timeout: float = 15.0):
        self._url = url
        self._api_key = api_key
        self._timeout = timeout

    async def submit(self, request: OrderRequest) -> OrderReceipt:
        """
        POST the order and return its identifiers.

        Raises:
            OrderSubmissionError: on transport errors, an error response,
                or a response without an order id.
        """
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._url, json=build_payload(request), headers=headers
                )
        except httpx.HTTPError as exc:
            raise OrderSubmissionError(f"Order service unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error:
            message = body.get("error") or body.get("message") or f"HTTP {response.status_code}"
            raise OrderSubmissionError(message)

        order_id = body.get("orderId")
        if not order_id:
            raise OrderSubmissionError(body.get("error") or "Order service returned no order id")

        return OrderReceipt(
            order_id=str(order_id),
            order_number=str(body.get("orderNumber") or order_id),
        )
