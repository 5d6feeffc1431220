"""Orders as reported by the external order source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

DESIGN_REFERENCE_LABEL: Final[str] = "Text"


@dataclass(frozen=True, slots=True)
class Customization:
    label: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class LineItem:
    sku: str | None
    quantity: int
    product_name: str | None = None
    customizations: tuple[Customization, ...] = ()

    def customization(self, label: str) -> str | None:
        """Return the value of the first customization carrying ``label``."""

        for entry in self.customizations:
            if entry.label == label:
                return entry.value
        return None


@dataclass(frozen=True, slots=True)
class Order:
    """Immutable snapshot of an order owned by the order source."""

    id: str
    order_number: str
    modified_on: datetime
    fulfillment_status: str
    customer_email: str | None = None
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)

    @property
    def design_id(self) -> str | None:
        """Design reference stored in the first line item's ``Text`` customization.

        Only the first line item is consulted. Blank values count as missing.
        """

        if not self.line_items:
            return None
        value = self.line_items[0].customization(DESIGN_REFERENCE_LABEL)
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def label(self) -> str:
        return f"{self.order_number} (ID: {self.id})"
