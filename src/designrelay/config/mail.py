"""Outbound mail transport configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, require_env_vars

DEFAULT_MAIL_PORT = 587
MAIL_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class MailConfig:
    host: str
    user: str
    password: str
    sender: str
    recipient: str
    port: int = DEFAULT_MAIL_PORT
    starttls: bool = True
    verify_tls: bool = True
    timeout_seconds: float = MAIL_TIMEOUT_SECONDS


def get_mail_config() -> MailConfig:
    values = require_env_vars(("MAIL_HOST", "MAIL_USER", "MAIL_PASSWORD", "MAIL_FROM", "MAIL_TO"))
    return MailConfig(
        host=values["MAIL_HOST"],
        user=values["MAIL_USER"],
        password=values["MAIL_PASSWORD"],
        sender=values["MAIL_FROM"],
        recipient=values["MAIL_TO"],
        port=env_int("MAIL_PORT", DEFAULT_MAIL_PORT),
        starttls=env_bool("MAIL_STARTTLS", True),  # noqa: FBT003
        verify_tls=env_bool("MAIL_VERIFY_TLS", True),  # noqa: FBT003
        timeout_seconds=env_float("MAIL_TIMEOUT_SECONDS", MAIL_TIMEOUT_SECONDS),
    )
