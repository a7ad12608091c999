"""HTTP client for the BD Courier history aggregation API."""
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from storefront.domain.risk import CourierHistoryRecord, CourierStats

logger = logging.getLogger(__name__)

COURIERS = ("pathao", "steadfast", "redx", "paperfly", "parceldex")

# Upstream answers that mean "no data right now" rather than a fault.
UNAVAILABLE_STATUSES = {401, 403, 429}


def extract_courier_data(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Pull the per-courier mapping out of any of the three response shapes:

    ``{"data": {"courierData": {...}}}``, ``{"data": {"summary": ..., "pathao": ...}}``
    or the bare ``{"summary": ..., "pathao": ...}``.
    """
    if not isinstance(payload, Mapping):
        return None

    data = payload.get("data")
    if isinstance(data, Mapping):
        if isinstance(data.get("courierData"), Mapping):
            return dict(data["courierData"])
        if _looks_like_courier_data(data):
            return dict(data)

    if isinstance(payload.get("courierData"), Mapping):
        return dict(payload["courierData"])
    if _looks_like_courier_data(payload):
        return {key: payload.get(key) for key in COURIERS + ("summary",)}
    return None


def _looks_like_courier_data(data: Mapping) -> bool:
    return any(key in data for key in ("summary", "pathao", "steadfast"))


def to_record(phone: str, courier_data: Mapping[str, Any]) -> CourierHistoryRecord:
    couriers = {
        name: CourierStats.from_payload(courier_data[name])
        for name in COURIERS
        if isinstance(courier_data.get(name), Mapping)
    }

    if isinstance(courier_data.get("summary"), Mapping):
        summary = CourierStats.from_payload(courier_data["summary"])
    else:
        summary = _summarize(couriers.values())

    return CourierHistoryRecord(phone=phone, summary=summary, couriers=couriers)


def _summarize(stats) -> CourierStats:
    stats = list(stats)
    total = sum(s.total_parcels for s in stats)
    success = sum(s.successful_parcels for s in stats)
    cancelled = sum(s.cancelled_parcels for s in stats)
    ratio = round(success / total * 100, 2) if total else 0.0
    return CourierStats(
        total_parcels=total,
        successful_parcels=success,
        cancelled_parcels=cancelled,
        success_ratio=ratio,
    )


class BdCourierClient:
    def __init__(self, base_url: str, api_key: str, *, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    async def fetch(self, phone: str) -> Optional[CourierHistoryRecord]:
        """
        Fetch courier history for an already-normalized phone number.

        Rate limiting, rejected credentials, upstream blocking and timeouts
        return None. Other HTTP errors propagate.
        """
        if not self._api_key:
            logger.warning("Courier history API key is not configured")
            return None

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}/api/courier-check",
                    params={"phone": phone},
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Accept": "application/json",
                    },
                )
        except httpx.TimeoutException:
            logger.info("Courier history request timed out for %s", phone)
            return None

        if response.status_code in UNAVAILABLE_STATUSES:
            logger.warning(
                "Courier history unavailable for %s (HTTP %s)", phone, response.status_code
            )
            return None

        response.raise_for_status()
        courier_data = extract_courier_data(response.json())
        if courier_data is None:
            logger.info("Unrecognized courier history response for %s", phone)
            return None
        return to_record(phone, courier_data)
