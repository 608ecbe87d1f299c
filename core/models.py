from django.db import models


class TimeStampedQuerySet(models.QuerySet):
    def newest_first(self):
        return self.order_by("-created_at", "-id")


class TimeStampedModel(models.Model):
    """Abstract base class that records creation and last-modification times.

    ``updated_at`` is refreshed on every ``save()``; the attendance edit
    request workflow compares it against the request's ``created_at``.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TimeStampedQuerySet.as_manager()

    class Meta:
        abstract = True
