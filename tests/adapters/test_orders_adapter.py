from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime, timedelta, timezone

import httpx
import pytest

from designrelay.adapters.http_resilience import RateLimit, ResilienceConfig, ResilientClient
from designrelay.adapters.orders import (
    HttpOrderSource,
    OrdersResponse,
    format_timestamp,
    parse_order,
)
from designrelay.config import OrderSourceConfig
from designrelay.domain.errors import SourceUnavailable
from tests.helpers.orders import order_payload

API_URL = "https://orders.example.com/1.0/commerce/orders"
START = datetime(2025, 5, 1, 11, 50, tzinfo=UTC)
END = datetime(2025, 5, 1, 12, tzinfo=UTC)


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def _make_source(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    max_pages: int = 10,
) -> HttpOrderSource:
    config = OrderSourceConfig(
        url=API_URL,
        api_key="secret-key-123456",
        user_agent="designrelay-tests",
        max_pages=max_pages,
    )
    return HttpOrderSource(config=config, client_factory=_make_client_factory(handler))


def test_format_timestamp_uses_millisecond_utc() -> None:
    local = datetime(2025, 5, 1, 14, 0, 0, 123456, tzinfo=timezone(timedelta(hours=2)))

    assert format_timestamp(local) == "2025-05-01T12:00:00.123Z"
    assert format_timestamp(END) == "2025-05-01T12:00:00.000Z"


def test_parse_order_reads_customizations() -> None:
    order = parse_order(order_payload(modified_on="2025-05-01T13:55:00.000+02:00"))

    assert order.id == "order-1"
    assert order.order_number == "1001"
    assert order.modified_on == datetime(2025, 5, 1, 11, 55, tzinfo=UTC)
    assert order.fulfillment_status == "FULFILLED"
    assert order.line_items[0].product_name == "Poster"
    assert order.design_id == "abc123"


def test_parse_order_tolerates_missing_customizations() -> None:
    payload = order_payload(text=None)
    payload["orderNumber"] = 1001

    order = parse_order(payload)

    assert order.order_number == "1001"
    assert order.line_items[0].customizations == ()
    assert order.design_id is None


def test_response_cursor_requires_next_page_flag() -> None:
    response = OrdersResponse.model_validate(
        {"result": [], "pagination": {"hasNextPage": False, "nextPageCursor": "abc"}}
    )

    assert response.next_cursor is None


def test_fetch_sends_window_and_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"result": [order_payload()], "pagination": {}})

    result = _make_source(handler)(start=START, end=END)

    assert [order.id for order in result.orders] == ["order-1"]
    assert result.pages == 1
    request = seen[0]
    assert str(request.url).startswith(API_URL)
    assert request.url.params["modifiedAfter"] == "2025-05-01T11:50:00.000Z"
    assert request.url.params["modifiedBefore"] == "2025-05-01T12:00:00.000Z"
    assert request.headers["Authorization"] == "Bearer secret-key-123456"
    assert request.headers["User-Agent"] == "designrelay-tests"


def test_fetch_drops_orders_outside_half_open_window() -> None:
    payloads = [
        order_payload("before", modified_on="2025-05-01T11:49:59.999Z"),
        order_payload("at-start", modified_on="2025-05-01T11:50:00.000Z"),
        order_payload("at-end", modified_on="2025-05-01T12:00:00.000Z"),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": payloads})

    result = _make_source(handler)(start=START, end=END)

    assert [order.id for order in result.orders] == ["at-start"]


def test_fetch_follows_pagination_cursor() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if "cursor" not in request.url.params:
            return httpx.Response(
                200,
                json={
                    "result": [order_payload("order-1")],
                    "pagination": {"hasNextPage": True, "nextPageCursor": "page-2"},
                },
            )
        return httpx.Response(200, json={"result": [order_payload("order-2")]})

    result = _make_source(handler)(start=START, end=END)

    assert [order.id for order in result.orders] == ["order-1", "order-2"]
    assert result.pages == 2
    assert dict(seen[1].url.params) == {"cursor": "page-2"}


def test_fetch_stops_at_page_limit() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(
            200,
            json={
                "result": [order_payload(f"order-{len(calls)}")],
                "pagination": {"hasNextPage": True, "nextPageCursor": f"page-{len(calls) + 1}"},
            },
        )

    result = _make_source(handler, max_pages=3)(start=START, end=END)

    assert len(calls) == 3
    assert result.pages == 3
    assert len(result.orders) == 3


@pytest.mark.parametrize("status", [401, 500])
def test_fetch_wraps_http_errors(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text="nope")

    with pytest.raises(SourceUnavailable, match=f"HTTP {status}: nope"):
        _make_source(handler)(start=START, end=END)


def test_fetch_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(SourceUnavailable, match="request failed"):
        _make_source(handler)(start=START, end=END)


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[]",
        b'{"result": [{"id": "broken"}]}',
    ],
)
def test_fetch_wraps_malformed_payloads(body: bytes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body)

    with pytest.raises(SourceUnavailable, match="Unexpected order API payload"):
        _make_source(handler)(start=START, end=END)


def test_empty_response_yields_no_orders() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    result = _make_source(handler)(start=START, end=END)

    assert result.orders == []


def test_resilient_client_applies_timeout_and_rate_limit() -> None:
    config = ResilienceConfig(
        name="orders",
        timeout_seconds=5.0,
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
    )

    client = ResilientClient(config)

    inner = client._client  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    assert inner.timeout == httpx.Timeout(5.0)
    assert str(inner.base_url) == ""
    assert client._limiter is not None  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    unlimited = ResilientClient(ResilienceConfig(name="orders"))
    assert unlimited._limiter is None  # noqa: SLF001  # type: ignore[reportPrivateUsage]
