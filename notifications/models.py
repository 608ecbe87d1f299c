# notifications/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


DEFAULT_PREFERENCES = {"in_app": True, "telegram": False}


def default_preferences():
    return dict(DEFAULT_PREFERENCES)


class NotificationType(models.TextChoices):
    EDIT_REQUEST_CREATED = "EDIT_REQUEST_CREATED", "Edit request created"
    EDIT_REQUEST_REVIEWED = "EDIT_REQUEST_REVIEWED", "Edit request reviewed"
    ATTENDANCE_ALERT = "ATTENDANCE_ALERT", "Attendance alert"


class NotificationQuerySet(models.QuerySet):
    def for_user(self, user):
        return self.filter(recipient=user)

    def unread(self):
        return self.filter(is_read=False)


class Notification(TimeStampedModel):
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=30, choices=NotificationType.choices)
    metadata = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["recipient", "is_read"], name="notif_recipient_read_idx")]

    def __str__(self):
        return f"{self.title} -> {self.recipient}"

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at", "updated_at"])


class NotificationPreference(TimeStampedModel):
    """Per-user channel switches, e.g. ``{"in_app": true, "telegram": false}``."""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notification_preference"
    )
    preferences = models.JSONField(default=default_preferences)

    def __str__(self):
        return f"Preferences for {self.user}"

    @classmethod
    def for_user(cls, user):
        """Effective preferences, falling back to the defaults for unset channels."""
        pref = getattr(user, "notification_preference", None)
        stored = pref.preferences if pref else {}
        return {**DEFAULT_PREFERENCES, **(stored or {})}
