"""Pydantic models describing the order API payloads."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class OrdersBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CustomizationPayload(OrdersBaseModel):
    label: str
    value: str | None = None


class LineItemPayload(OrdersBaseModel):
    sku: str | None = None
    quantity: int = 1
    product_name: str | None = Field(default=None, alias="productName")
    customizations: list[CustomizationPayload] | None = None

    _normalize_sku = field_validator("sku", mode="before")(_blank_to_none)


class OrderPayload(OrdersBaseModel):
    id: str
    order_number: str = Field(alias="orderNumber")
    modified_on: datetime = Field(alias="modifiedOn")
    fulfillment_status: str = Field(default="PENDING", alias="fulfillmentStatus")
    customer_email: str | None = Field(default=None, alias="customerEmail")
    line_items: list[LineItemPayload] = Field(default_factory=list, alias="lineItems")

    @field_validator("order_number", mode="before")
    @classmethod
    def _stringify_number(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("modified_on")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    _normalize_email = field_validator("customer_email", mode="before")(_blank_to_none)


class PaginationPayload(OrdersBaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    next_page_cursor: str | None = Field(default=None, alias="nextPageCursor")

    _normalize_cursor = field_validator("next_page_cursor", mode="before")(_blank_to_none)


class OrdersResponse(OrdersBaseModel):
    result: list[OrderPayload] = Field(default_factory=list)
    pagination: PaginationPayload = Field(default_factory=PaginationPayload)

    @property
    def next_cursor(self) -> str | None:
        if self.pagination.has_next_page:
            return self.pagination.next_page_cursor
        return None
