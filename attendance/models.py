from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import TimeStampedModel


class AttendanceStatus(models.TextChoices):
    """Per-period (schedule based) attendance."""
    PRESENT = "PRESENT", "Present"
    ABSENT = "ABSENT", "Absent"
    LATE = "LATE", "Late"
    EXCUSED = "EXCUSED", "Excused"


class DailyAttendanceStatus(models.TextChoices):
    """Overall daily presence (morning register)."""
    PRESENT = "PRESENT", "Present"
    ABSENT = "ABSENT", "Absent"
    LATE = "LATE", "Late"
    EXCUSED = "EXCUSED", "Excused"
    HALF_DAY = "HALF_DAY", "Half Day"


class AttendanceType(models.TextChoices):
    SCHEDULE_BASED = "SCHEDULE_BASED", "Schedule based"
    DAILY = "DAILY", "Daily"


class EditRequestStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"


class BaseAttendance(TimeStampedModel):
    """Fields and lock behaviour shared by both attendance record kinds.

    Once ``is_locked`` is set the record can only change through an approved
    ``AttendanceEditRequest`` (or directly by staff in the Django admin).
    """
    attendance_type = None
    status_choices = None
    editable_fields = ("status", "notes")

    student = models.ForeignKey("students.Student", on_delete=models.CASCADE, related_name="+")
    session = models.ForeignKey("academics.AcademicSession", on_delete=models.PROTECT, related_name="+")
    date = models.DateField()
    marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    marked_at = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True, null=True)
    is_locked = models.BooleanField(default=False)

    class Meta:
        abstract = True

    def apply_changes(self, changes):
        """Set the given fields and save; only ``editable_fields`` are accepted.

        The lock is left as it is.
        """
        unknown = set(changes) - set(self.editable_fields)
        if unknown:
            raise ValueError(f"Fields not editable on {self.__class__.__name__}: {', '.join(sorted(unknown))}")

        for field, value in changes.items():
            setattr(self, field, value)
        self.save(update_fields=list(changes) + ["updated_at"])


class ScheduleBasedAttendance(BaseAttendance):
    attendance_type = AttendanceType.SCHEDULE_BASED
    status_choices = AttendanceStatus

    schedule = models.ForeignKey("classes_app.Schedule", on_delete=models.CASCADE, related_name="attendance_records")
    status = models.CharField(max_length=15, choices=AttendanceStatus.choices)

    class Meta:
        db_table = "schedule_based_attendance"
        ordering = ["-date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "schedule", "date"],
                name="uniq_schedule_attendance_per_student_day",
            ),
        ]
        indexes = [
            models.Index(fields=["schedule", "date"], name="sched_att_schedule_date_idx"),
            models.Index(fields=["student", "date"], name="sched_att_student_date_idx"),
        ]

    def __str__(self):
        return f"{self.student} - {self.schedule} ({self.status}) on {self.date}"


class StudentDailyAttendance(BaseAttendance):
    attendance_type = AttendanceType.DAILY
    status_choices = DailyAttendanceStatus
    editable_fields = ("status", "notes", "check_in_time", "check_out_time")

    class_program = models.ForeignKey(
        "classes_app.ClassProgram", on_delete=models.CASCADE, related_name="daily_attendance"
    )
    status = models.CharField(
        max_length=15, choices=DailyAttendanceStatus.choices, default=DailyAttendanceStatus.ABSENT
    )
    check_in_time = models.DateTimeField(null=True, blank=True)
    check_out_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "student_daily_attendance"
        ordering = ["-date", "class_program", "student"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "class_program", "date"],
                name="uniq_daily_attendance_per_student_day",
            ),
        ]
        indexes = [
            models.Index(fields=["class_program", "date"], name="daily_att_class_date_idx"),
            models.Index(fields=["student", "date"], name="daily_att_student_date_idx"),
        ]

    def __str__(self):
        return f"{self.student} - {self.class_program} ({self.status}) on {self.date}"


class AttendanceEditRequest(TimeStampedModel):
    """A teacher's proposed patch to a locked attendance record, reviewed by an admin.

    ``attendance_id`` points into the table selected by ``attendance_type``;
    there is no database-level foreign key across the two record tables.
    """
    attendance_id = models.BigIntegerField()
    attendance_type = models.CharField(max_length=20, choices=AttendanceType.choices)
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="attendance_edit_requests"
    )
    proposed_changes = models.JSONField()
    reason = models.TextField()
    status = models.CharField(max_length=10, choices=EditRequestStatus.choices, default=EditRequestStatus.PENDING)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reviewed_attendance_edit_requests",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    admin_comment = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "attendance_edit_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["attendance_id", "attendance_type"], name="edit_req_attendance_idx"),
            models.Index(fields=["status"], name="edit_req_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["attendance_id", "attendance_type"],
                condition=Q(status="PENDING"),
                name="uniq_pending_edit_request_per_record",
            ),
        ]

    def __str__(self):
        return f"Edit request #{self.pk} for {self.attendance_type} {self.attendance_id} ({self.status})"

    @property
    def is_pending(self):
        return self.status == EditRequestStatus.PENDING
