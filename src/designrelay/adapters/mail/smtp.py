"""SMTP transport for order notifications."""

from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from designrelay.config import MailConfig, get_mail_config
from designrelay.domain.errors import DeliveryFailed
from designrelay.domain.ports.notification import Notifier

from .message import build_message

if TYPE_CHECKING:
    from collections.abc import Callable

    from designrelay.domain.model import Design, Order

log = getLogger(__name__)


def _tls_context(*, verify: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


@dataclass(slots=True)
class SmtpNotifier:
    """Deliver notifications through an SMTP relay, one connection per message."""

    config: MailConfig = field(default_factory=get_mail_config)
    smtp_factory: Callable[..., smtplib.SMTP] = field(default=smtplib.SMTP)

    def send(self, order: Order, design: Design) -> None:
        try:
            # header values with line breaks raise ValueError
            message = build_message(
                order,
                design,
                sender=self.config.sender,
                recipient=self.config.recipient,
            )
            with self.smtp_factory(
                self.config.host,
                self.config.port,
                timeout=self.config.timeout_seconds,
            ) as smtp:
                if self.config.starttls:
                    smtp.starttls(context=_tls_context(verify=self.config.verify_tls))
                smtp.login(self.config.user, self.config.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise DeliveryFailed(
                f"Could not deliver notification for order {order.order_number}: {exc}"
            ) from exc
        log.debug("Delivered notification for order %s to %s", order.label, self.config.recipient)


if TYPE_CHECKING:
    _notifier_check: Notifier = SmtpNotifier()
