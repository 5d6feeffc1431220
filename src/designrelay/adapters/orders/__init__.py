"""Public interface for the order API adapter."""

from __future__ import annotations

from .client import HttpOrderSource, format_timestamp
from .schema import OrderPayload, OrdersResponse
from .translator import parse_order

__all__ = [
    "HttpOrderSource",
    "OrderPayload",
    "OrdersResponse",
    "format_timestamp",
    "parse_order",
]
