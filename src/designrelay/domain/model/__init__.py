"""Domain model for designrelay."""

from __future__ import annotations

from .design import (
    PNG_CONTENT_TYPE,
    PNG_DATA_URL_PREFIX,
    Design,
    encode_png_data_url,
    new_design,
)
from .ledger import ProcessedOrder
from .order import DESIGN_REFERENCE_LABEL, Customization, LineItem, Order

__all__ = [
    "DESIGN_REFERENCE_LABEL",
    "PNG_CONTENT_TYPE",
    "PNG_DATA_URL_PREFIX",
    "Customization",
    "Design",
    "LineItem",
    "Order",
    "ProcessedOrder",
    "encode_png_data_url",
    "new_design",
]
