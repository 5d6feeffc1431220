"""Error taxonomy for the reconciliation core."""

from __future__ import annotations


class DesignRelayError(RuntimeError):
    """Base class for reconciliation errors."""


class SourceUnavailable(DesignRelayError):
    """The order source could not be queried; the whole cycle fails."""


class DuplicateKey(DesignRelayError):
    """A record with the same unique key already exists."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate key: {key}")
        self.key = key


class DesignNotFound(DesignRelayError, LookupError):
    """No stored design matches the given identifier."""

    def __init__(self, design_id: str) -> None:
        super().__init__(f"Design not found: {design_id}")
        self.design_id = design_id


class InvalidDesignPayload(DesignRelayError, ValueError):
    """A stored design image cannot be decoded."""


class DeliveryFailed(DesignRelayError):
    """The notification transport rejected or failed to deliver a message."""


__all__ = [
    "DeliveryFailed",
    "DesignNotFound",
    "DesignRelayError",
    "DuplicateKey",
    "InvalidDesignPayload",
    "SourceUnavailable",
]
