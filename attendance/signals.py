# attendance/signals.py
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver
from django.utils.formats import date_format

from notifications.dispatch import notify
from notifications.models import NotificationType
from .models import AttendanceEditRequest, DailyAttendanceStatus, EditRequestStatus, StudentDailyAttendance

logger = logging.getLogger(__name__)

PARENT_ALERT_STATUSES = (DailyAttendanceStatus.ABSENT, DailyAttendanceStatus.LATE)


def _cache_old_status(sender, instance):
    """Cache previous status so we can detect real changes on save."""
    if instance.pk:
        instance._old_status = sender.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
    else:
        instance._old_status = None


@receiver(pre_save, sender=AttendanceEditRequest)
def _cache_old_request_status(sender, instance, **kwargs):
    _cache_old_status(sender, instance)


@receiver(pre_save, sender=StudentDailyAttendance)
def _cache_old_daily_status(sender, instance, **kwargs):
    _cache_old_status(sender, instance)


@receiver(post_save, sender=AttendanceEditRequest)
def handle_edit_request_notifications(sender, instance, created, raw=False, **kwargs):
    """
    - New request: every admin is told a review is waiting.
    - PENDING -> APPROVED/REJECTED: the requester is told the outcome.
    """
    if raw:
        return

    metadata = {
        "request_id": instance.pk,
        "attendance_id": instance.attendance_id,
        "attendance_type": instance.attendance_type,
    }

    if created:
        User = get_user_model()
        admins = User.objects.filter(
            Q(role=User.Role.ADMIN) | Q(is_superuser=True), is_active=True
        ).values_list("pk", flat=True)
        notify(
            list(admins),
            "New attendance edit request",
            f"{instance.requested_by.display_name} requested a change to "
            f"{instance.get_attendance_type_display().lower()} attendance #{instance.attendance_id}.\n\n"
            f"Reason: {instance.reason}",
            NotificationType.EDIT_REQUEST_CREATED,
            metadata,
        )
        return

    old_status = getattr(instance, "_old_status", None)
    if old_status == EditRequestStatus.PENDING and instance.status != EditRequestStatus.PENDING:
        message = f"Your edit request #{instance.pk} was {instance.status.lower()}."
        if instance.admin_comment:
            message += f"\n\nAdmin comment: {instance.admin_comment}"
        notify(
            [instance.requested_by_id],
            f"Attendance edit request {instance.status.lower()}",
            message,
            NotificationType.EDIT_REQUEST_REVIEWED,
            {**metadata, "status": instance.status},
        )


@receiver(post_save, sender=StudentDailyAttendance)
def handle_daily_attendance_alerts(sender, instance, created, raw=False, **kwargs):
    """Tell the parent when a child is marked ABSENT or LATE (only on a real status change)."""
    if raw or instance.status not in PARENT_ALERT_STATUSES:
        return

    old_status = getattr(instance, "_old_status", None)
    if not created and old_status == instance.status:
        return

    student = instance.student
    if not student.parent_id:
        return

    when_str = date_format(instance.date, "DATE_FORMAT")
    notify(
        [student.parent_id],
        f"{student.full_name} marked {instance.status.lower()}",
        f"Dear Parent,\n\n{student.full_name} was marked {instance.status.lower()} on {when_str}.\n\n"
        "Please contact the school if you have any questions.",
        NotificationType.ATTENDANCE_ALERT,
        {"student_id": student.pk, "attendance_id": instance.pk, "date": instance.date.isoformat(),
         "status": instance.status},
    )
    logger.debug("AttendanceSignal | %s | %s -> %s", student.full_name, old_status, instance.status)
