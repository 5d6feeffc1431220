"""Render order notification emails."""

from __future__ import annotations

from email.message import EmailMessage
from html import escape
from typing import TYPE_CHECKING

from designrelay.domain.model import PNG_CONTENT_TYPE

if TYPE_CHECKING:
    from designrelay.domain.model import Design, LineItem, Order

SUBJECT_TEMPLATE = "New Order Image Received - Order ID: {order_number}"


def _describe_item(item: LineItem) -> str:
    name = item.sku or item.product_name or "unknown item"
    return f"{name} (Qty: {item.quantity})"


def describe_items(order: Order) -> str:
    return ", ".join(_describe_item(item) for item in order.line_items)


def render_html(order: Order) -> str:
    return (
        f"<p>Order {escape(order.order_number)} completed.</p>\n"
        f"<p>Customer Email: {escape(order.customer_email or 'n/a')}</p>\n"
        f"<p>Items: {escape(describe_items(order))}</p>\n"
        f"<p>Fulfillment Status: {escape(order.fulfillment_status)}</p>\n"
        "<p>See attached design image.</p>\n"
    )


def render_text(order: Order) -> str:
    return (
        f"Order {order.order_number} completed.\n"
        f"Customer Email: {order.customer_email or 'n/a'}\n"
        f"Items: {describe_items(order)}\n"
        f"Fulfillment Status: {order.fulfillment_status}\n"
        "See attached design image.\n"
    )


def build_message(order: Order, design: Design, *, sender: str, recipient: str) -> EmailMessage:
    """Compose the notification with the decoded design attached as a PNG."""

    message = EmailMessage()
    message["Subject"] = SUBJECT_TEMPLATE.format(order_number=order.order_number)
    message["From"] = sender
    message["To"] = recipient
    message.set_content(render_text(order))
    message.add_alternative(render_html(order), subtype="html")

    maintype, subtype = PNG_CONTENT_TYPE.split("/", 1)
    message.add_attachment(
        design.decode_image(),
        maintype=maintype,
        subtype=subtype,
        filename=design.attachment_filename,
    )
    return message
