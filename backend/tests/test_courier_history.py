"""Tests for courier history lookup and the BD Courier client."""
import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from storefront.application.courier.history import CourierHistoryCache, CourierHistoryService
from storefront.integrations.bdcourier import BdCourierClient, extract_courier_data, to_record
from conftest import FakeCourierSource, courier_record

PHONE = "01712345678"


# -------------------------------------------------
# Service
# -------------------------------------------------
async def test_lookup_is_cached_per_normalized_phone():
    source = FakeCourierSource({PHONE: courier_record(PHONE, 10, 9, 1, 90)})
    service = CourierHistoryService(source)

    first = await service.get_history("+8801712345678")
    second = await service.get_history("017 1234 5678")

    assert first is second
    assert source.calls == [PHONE]
    assert PHONE in service.cache


async def test_concurrent_lookups_share_one_fetch():
    source = FakeCourierSource({PHONE: courier_record(PHONE, 10, 9, 1, 90)}, delay=0.02)
    service = CourierHistoryService(source)

    results = await asyncio.gather(*(service.get_history(PHONE) for _ in range(5)))

    assert len(source.calls) == 1
    assert all(r is results[0] for r in results)


async def test_failed_lookup_returns_none_and_is_not_cached(caplog):
    source = FakeCourierSource(error=RuntimeError("upstream down"))
    service = CourierHistoryService(source)

    with caplog.at_level(logging.WARNING):
        assert await service.get_history(PHONE) is None
    assert "upstream down" in caplog.text
    assert len(service.cache) == 0

    source.error = None
    source.records[PHONE] = courier_record(PHONE, 3, 3, 0, 100)
    assert (await service.get_history(PHONE)).total_parcels == 3
    assert len(source.calls) == 2


async def test_missing_history_is_not_cached():
    source = FakeCourierSource()
    service = CourierHistoryService(source)
    assert await service.get_history(PHONE) is None
    assert await service.get_history(PHONE) is None
    assert len(source.calls) == 2


async def test_malformed_phone_skips_the_source():
    source = FakeCourierSource()
    service = CourierHistoryService(source)
    assert await service.get_history("12345") is None
    assert source.calls == []


async def test_cancelled_caller_does_not_cancel_shared_fetch():
    source = FakeCourierSource({PHONE: courier_record(PHONE, 1, 1, 0, 100)}, delay=0.02)
    service = CourierHistoryService(source)

    waiter = asyncio.create_task(service.get_history(PHONE))
    await asyncio.sleep(0)
    waiter.cancel()

    record = await service.get_history(PHONE)
    assert record.total_parcels == 1
    assert len(source.calls) == 1


def test_cache_keeps_the_first_record():
    cache = CourierHistoryCache()
    first = courier_record(PHONE, 1, 1, 0, 100)
    assert cache.put(PHONE, first) is first
    assert cache.put(PHONE, courier_record(PHONE, 9, 0, 9, 0)) is first
    assert cache.get(PHONE) is first


# -------------------------------------------------
# Response shapes
# -------------------------------------------------
STATS = {"total_parcel": 10, "success_parcel": 8, "cancelled_parcel": 2, "success_ratio": 80}


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "success", "data": {"courierData": {"summary": STATS, "pathao": STATS}}},
        {"status": "success", "data": {"summary": STATS, "pathao": STATS}},
        {"summary": STATS, "pathao": STATS},
    ],
)
def test_all_response_shapes_are_understood(payload):
    record = to_record(PHONE, extract_courier_data(payload))
    assert record.total_parcels == 10
    assert record.cancelled_parcels == 2
    assert set(record.couriers) == {"pathao"}


def test_summary_is_aggregated_when_missing():
    data = extract_courier_data({"data": {"pathao": STATS, "steadfast": {"total_parcel": 10, "success_parcel": 10}}})
    record = to_record(PHONE, data)
    assert record.total_parcels == 20
    assert record.successful_parcels == 18
    assert record.success_ratio == 90.0


def test_unrecognized_payload():
    assert extract_courier_data({"status": "error"}) is None
    assert extract_courier_data(["nope"]) is None


# -------------------------------------------------
# HTTP client
# -------------------------------------------------
def mock_client(mock_client_cls, *, status_code=200, json_data=None, side_effect=None):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = json_data
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock()
    if side_effect is not None:
        mock_client.get.side_effect = side_effect
    else:
        mock_client.get.return_value = mock_response
    mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return mock_client, mock_response


async def test_client_fetches_and_parses():
    client = BdCourierClient("https://api.bdcourier.test/", "secret")
    with patch("httpx.AsyncClient") as mock_client_cls:
        http, _ = mock_client(mock_client_cls, json_data={"data": {"courierData": {"summary": STATS}}})
        record = await client.fetch(PHONE)

    assert record.total_parcels == 10
    call = http.get.call_args
    assert call.args[0] == "https://api.bdcourier.test/api/courier-check"
    assert call.kwargs["params"] == {"phone": PHONE}
    assert call.kwargs["headers"]["Authorization"] == "Bearer secret"


@pytest.mark.parametrize("status_code", [401, 403, 429])
async def test_client_treats_blocking_statuses_as_unavailable(status_code):
    client = BdCourierClient("https://api.bdcourier.test", "secret")
    with patch("httpx.AsyncClient") as mock_client_cls:
        _, response = mock_client(mock_client_cls, status_code=status_code)
        assert await client.fetch(PHONE) is None
    response.raise_for_status.assert_not_called()


async def test_client_timeout_returns_none():
    client = BdCourierClient("https://api.bdcourier.test", "secret")
    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client(mock_client_cls, side_effect=httpx.ReadTimeout("slow"))
        assert await client.fetch(PHONE) is None


async def test_client_server_errors_propagate():
    client = BdCourierClient("https://api.bdcourier.test", "secret")
    with patch("httpx.AsyncClient") as mock_client_cls:
        _, response = mock_client(mock_client_cls, status_code=500)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "boom", request=MagicMock(), response=MagicMock()
        )
        with pytest.raises(httpx.HTTPStatusError):
            await client.fetch(PHONE)


async def test_client_without_key_does_not_call_out():
    client = BdCourierClient("https://api.bdcourier.test", "")
    with patch("httpx.AsyncClient") as mock_client_cls:
        assert await client.fetch(PHONE) is None
    mock_client_cls.assert_not_called()


async def test_service_degrades_when_client_raises():
    client = BdCourierClient("https://api.bdcourier.test", "secret")
    service = CourierHistoryService(client)
    with patch("httpx.AsyncClient") as mock_client_cls:
        _, response = mock_client(mock_client_cls, status_code=500)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "boom", request=MagicMock(), response=MagicMock()
        )
        assert await service.get_history(PHONE) is None
