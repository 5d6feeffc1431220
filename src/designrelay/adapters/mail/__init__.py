"""Outbound mail adapter."""

from __future__ import annotations

from .message import build_message
from .smtp import SmtpNotifier

__all__ = ["SmtpNotifier", "build_message"]
