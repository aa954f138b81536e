"""Outbound customer notifications.

Delivery is best-effort: a notifier reports failure through its return
value and callers log it. Email is held back until the surrounding database
transaction commits. Nothing here may fail a booking or attendance
change that has already committed.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Any

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)

BOOKING_CONFIRMED = "booking_confirmed"
BOOKING_CANCELLED = "booking_cancelled"
BIRTHDAY = "birthday"


class Notifier(ABC):
    """Interface for sending a templated message to one recipient."""

    @abstractmethod
    def send(self, kind: str, recipient_email: str, template_data: dict[str, Any]) -> bool:
        """Send a message and return whether delivery was accepted."""
        ...


class EmailNotifier(Notifier):
    """Renders ``studio/emails/<kind>.txt`` and sends it with Django's mail API.

    Inside an open transaction the message is rendered straight away but only
    handed to the mail backend once the transaction commits, so a rollback
    sends nothing.
    """

    def send(self, kind: str, recipient_email: str, template_data: dict[str, Any]) -> bool:
        context = {"app_url": settings.STUDIO_APP_URL, **template_data}
        subject = render_to_string(f"studio/emails/{kind}_subject.txt", context).strip()
        body = render_to_string(f"studio/emails/{kind}.txt", context)
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(
                partial(self._deliver_after_commit, kind, subject, body, recipient_email)
            )
            return True
        return self._deliver(subject, body, recipient_email)

    def _deliver(self, subject: str, body: str, recipient_email: str) -> bool:
        sent = send_mail(
            subject,
            body,
            settings.STUDIO_FROM_EMAIL,
            [recipient_email],
            fail_silently=False,
        )
        return sent == 1

    def _deliver_after_commit(
        self, kind: str, subject: str, body: str, recipient_email: str
    ) -> None:
        try:
            delivered = self._deliver(subject, body, recipient_email)
        except Exception:
            logger.exception("Failed to send %s notification to %s", kind, recipient_email)
            return
        if not delivered:
            logger.warning("Notification %s to %s was not delivered", kind, recipient_email)


class NullNotifier(Notifier):
    def send(self, kind: str, recipient_email: str, template_data: dict[str, Any]) -> bool:
        logger.debug("Notification %s to %s dropped", kind, recipient_email)
        return True


def notify_safely(
    notifier: Notifier, kind: str, recipient_email: str, template_data: dict[str, Any]
) -> bool:
    """Send through ``notifier``, logging instead of raising on failure."""
    try:
        delivered = notifier.send(kind, recipient_email, template_data)
    except Exception:
        logger.exception("Failed to send %s notification to %s", kind, recipient_email)
        return False
    if not delivered:
        logger.warning("Notification %s to %s was not delivered", kind, recipient_email)
    return delivered
