"""Port for dispatching order notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from designrelay.domain.model import Design, Order


@runtime_checkable
class Notifier(Protocol):
    """Sends one message per order with the design attached.

    Implementations raise ``DeliveryFailed`` when the transport fails.
    """

    def send(self, order: Order, design: Design) -> None: ...
