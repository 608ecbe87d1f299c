# notifications/dispatch.py
"""Queue notifications so they are delivered only after the surrounding
transaction commits, and never break the request that produced them."""
import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from scheduler.jobs import submit
from .channels import send_telegram_message
from .models import Notification, NotificationPreference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationIntent:
    recipient_ids: tuple
    title: str
    message: str
    type: str
    metadata: dict = field(default_factory=dict)


def notify(recipients, title, message, type, metadata=None):
    """Register a notification for delivery once the current transaction commits.

    ``recipients`` may hold users or user ids. Returns the intent, or None
    when there is nobody to notify.
    """
    recipient_ids = tuple(sorted({getattr(r, "pk", r) for r in recipients if r is not None}))
    if not recipient_ids:
        return None

    intent = NotificationIntent(
        recipient_ids=recipient_ids,
        title=title,
        message=message,
        type=type,
        metadata=dict(metadata or {}),
    )
    transaction.on_commit(lambda: dispatch(intent))
    return intent


def dispatch(intent):
    if settings.NOTIFICATIONS_ASYNC:
        try:
            submit(deliver, intent)
            return
        except Exception:
            logger.exception("Could not queue notification '%s'; delivering inline", intent.title)
    deliver(intent)


def deliver(intent):
    """Write in-app rows and push Telegram messages per recipient preferences.

    Failures are logged per recipient and never propagate.
    """
    User = get_user_model()
    try:
        users = list(
            User.objects.filter(pk__in=intent.recipient_ids, is_active=True)
            .select_related("notification_preference")
        )
    except Exception:
        logger.exception("Failed to load recipients for notification '%s'", intent.title)
        return 0

    delivered = 0
    for user in users:
        prefs = NotificationPreference.for_user(user)
        try:
            if prefs.get("in_app"):
                Notification.objects.create(
                    recipient=user,
                    title=intent.title,
                    message=intent.message,
                    type=intent.type,
                    metadata=intent.metadata,
                )
            if prefs.get("telegram") and user.telegram_chat_id:
                send_telegram_message(user.telegram_chat_id, f"{intent.title}\n\n{intent.message}")
            delivered += 1
        except Exception:
            logger.exception("Failed to deliver notification '%s' to user %s", intent.title, user.pk)

    logger.info("Notification '%s' delivered to %s/%s recipients", intent.title, delivered, len(users))
    return delivered
