"""Translate order API payloads into domain orders."""

from __future__ import annotations

from collections.abc import Mapping

from designrelay.domain.model import Customization, LineItem, Order

from .schema import LineItemPayload, OrderPayload


def _translate_line_item(payload: LineItemPayload) -> LineItem:
    return LineItem(
        sku=payload.sku,
        quantity=payload.quantity,
        product_name=payload.product_name,
        customizations=tuple(
            Customization(label=entry.label, value=entry.value)
            for entry in payload.customizations or ()
        ),
    )


def parse_order(payload: OrderPayload | Mapping[str, object]) -> Order:
    """Build an ``Order`` from a raw or validated payload."""

    model = payload if isinstance(payload, OrderPayload) else OrderPayload.model_validate(payload)
    return Order(
        id=model.id,
        order_number=model.order_number,
        modified_on=model.modified_on,
        fulfillment_status=model.fulfillment_status,
        customer_email=model.customer_email,
        line_items=tuple(_translate_line_item(item) for item in model.line_items),
    )
