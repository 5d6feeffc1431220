"""HTTP client for the order API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from designrelay.adapters.http_resilience import ResilienceConfig, ResilientClient
from designrelay.config import OrderSourceConfig, get_order_source_config
from designrelay.domain.errors import SourceUnavailable
from designrelay.domain.ports.fetching import OrderFetchResult, OrderSource
from designrelay.domain.time_windows import TimeWindow

from .schema import OrdersResponse
from .translator import parse_order

if TYPE_CHECKING:
    from collections.abc import Callable

    from designrelay.domain.model import Order

log = getLogger(__name__)

_ERROR_BODY_PREVIEW = 200


def format_timestamp(value: datetime) -> str:
    """Render an aware datetime as ISO-8601 UTC with millisecond precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _describe_failure(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        body = exc.response.text[:_ERROR_BODY_PREVIEW]
        return f"Order API returned HTTP {exc.response.status_code}: {body}"
    if isinstance(exc, httpx.HTTPError):
        return f"Order API request failed: {exc!r}"
    return f"Unexpected order API payload: {exc}"


@dataclass(slots=True)
class HttpOrderSource:
    """Fetch orders modified within a window, following pagination cursors."""

    config: OrderSourceConfig = field(default_factory=get_order_source_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, *, start: datetime, end: datetime) -> OrderFetchResult:
        log.debug("Starting poll with API key %s", self.config.key_preview)
        try:
            return asyncio.run(self._fetch_orders_async(start=start, end=end))
        except (httpx.HTTPError, ValueError) as exc:
            # pydantic.ValidationError and JSONDecodeError are both ValueErrors
            raise SourceUnavailable(_describe_failure(exc)) from exc

    async def _fetch_orders_async(self, *, start: datetime, end: datetime) -> OrderFetchResult:
        orders: list[Order] = []
        params: dict[str, str] = {
            "modifiedAfter": format_timestamp(start),
            "modifiedBefore": format_timestamp(end),
        }
        pages = 0

        async with self.client_factory(self.config.resilience) as client:
            while True:
                response = await self._request_page(client=client, params=params)
                pages += 1

                for payload in response.result:
                    order = parse_order(payload)
                    if not TimeWindow.contains(order.modified_on, start, end):
                        log.debug("Ignoring order %s modified outside the window", order.label)
                        continue
                    orders.append(order)

                cursor = response.next_cursor
                if cursor is None:
                    break
                if pages >= self.config.max_pages:
                    log.warning(
                        "Stopped after %s pages although the order API reports more", pages
                    )
                    break
                # cursor requests must not repeat the original filters
                params = {"cursor": cursor}

        return OrderFetchResult(orders=orders, pages=pages)

    async def _request_page(
        self,
        *,
        client: ResilientClient,
        params: dict[str, str],
    ) -> OrdersResponse:
        response = await client.get(
            self.config.url,
            params=httpx.QueryParams(params),
            headers={
                "Authorization": f"Bearer {self.config.api_key}",
                "User-Agent": self.config.user_agent,
            },
        )
        response.raise_for_status()
        payload = response.json()
        log.debug("Order API response: %s", payload)
        if not isinstance(payload, dict):
            raise ValueError("Order API response is not a JSON object")
        return OrdersResponse.model_validate(payload)


if TYPE_CHECKING:
    _source_check: OrderSource = HttpOrderSource()
