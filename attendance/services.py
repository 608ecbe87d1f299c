# attendance/services.py
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from academics.services import get_active_session
from classes_app.models import ClassProgram, Schedule
from classes_app.services import is_class_teacher, is_enrolled
from core.exceptions import BadRequest, Forbidden, NotFound
from teachers.services import get_teacher_for_user
from .exceptions import AttendanceLocked, StaleEditRequest
from .models import (
    AttendanceEditRequest,
    EditRequestStatus,
    ScheduleBasedAttendance,
    StudentDailyAttendance,
)
from .records import get_record, get_record_model, normalize_changes, on_record_date, to_model_values

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Marking
# ---------------------------------------------------------------------------

def mark_attendance(user, *, date, records, schedule_id=None, class_id=None,
                    session_provider=get_active_session):
    """Mark a batch of students for one schedule slot or one class day.

    Exactly one of ``schedule_id`` (per-period) or ``class_id`` (daily register)
    must be given. Every written record is locked. The batch is atomic: any
    failure rolls back all of it.
    """
    if not schedule_id and not class_id:
        raise BadRequest("Either schedule_id or class_id must be provided")
    if schedule_id and class_id:
        raise BadRequest("Cannot provide both schedule_id and class_id")
    if date > timezone.localdate():
        raise BadRequest("Attendance cannot be marked for a future date")

    session = session_provider()

    if schedule_id:
        marked, updated = _mark_schedule_based(user, schedule_id, date, session, records)
        message = "Attendance marked successfully"
    else:
        marked, updated = _mark_daily(user, class_id, date, session, records)
        message = "Student daily attendance marked successfully"

    return {"message": message, "marked": marked, "updated": updated, "total": len(records)}


def _mark_schedule_based(user, schedule_id, date, session, records):
    teacher = get_teacher_for_user(user)
    marked = updated = 0

    with transaction.atomic():
        schedule = Schedule.objects.filter(pk=schedule_id).first()
        if schedule is None:
            raise NotFound("Schedule not found")
        if schedule.teacher_id != teacher.pk:
            raise Forbidden("You are not assigned to this schedule")

        for entry in records:
            _require_enrollment(entry["student_id"], schedule.class_program_id)
            created = _write_record(
                ScheduleBasedAttendance,
                lookup={"student_id": entry["student_id"], "schedule": schedule, "date": date},
                entry=entry,
                user=user,
                session=session,
            )
            if created:
                marked += 1
            else:
                updated += 1

    logger.info(
        "Teacher %s marked attendance for schedule %s on %s. Marked: %s, Updated: %s",
        teacher.pk, schedule_id, date.isoformat(), marked, updated,
    )
    return marked, updated


def _mark_daily(user, class_id, date, session, records):
    teacher = get_teacher_for_user(user)
    if not ClassProgram.objects.filter(pk=class_id).exists():
        raise NotFound("Class not found")
    if not is_class_teacher(teacher, class_id):
        raise Forbidden("Only the class teacher can mark daily attendance for this class")

    marked = updated = 0
    with transaction.atomic():
        for entry in records:
            _require_enrollment(entry["student_id"], class_id)
            created = _write_record(
                StudentDailyAttendance,
                lookup={"student_id": entry["student_id"], "class_program_id": class_id, "date": date},
                entry=entry,
                user=user,
                session=session,
            )
            if created:
                marked += 1
            else:
                updated += 1

    logger.info(
        "Teacher %s marked daily attendance for class %s on %s. Marked: %s, Updated: %s",
        teacher.pk, class_id, date.isoformat(), marked, updated,
    )
    return marked, updated


def _require_enrollment(student_id, class_id):
    if not is_enrolled(student_id, class_id):
        raise NotFound(f"Student {student_id} not enrolled in class {class_id}")


def _clean_status(model, status):
    value = (status or "").upper()
    if value not in model.status_choices.values:
        raise BadRequest(f"Invalid status: {status}")
    return value


def _write_record(model, *, lookup, entry, user, session):
    """Create the record for ``lookup`` or update it while still unlocked.

    ``get_or_create`` re-reads on IntegrityError, so two concurrent first marks
    end with a single row. Returns True when a row was created.
    """
    now = timezone.now()
    status = _clean_status(model, entry["status"])
    notes = entry.get("notes") or None

    defaults = {
        "session": session,
        "status": status,
        "notes": notes,
        "marked_by": user,
        "marked_at": now,
        "is_locked": True,
    }
    if model is StudentDailyAttendance:
        defaults["check_in_time"] = now

    record, created = model.objects.select_for_update().get_or_create(**lookup, defaults=defaults)
    if created:
        return True

    if record.is_locked:
        raise AttendanceLocked()

    record.status = status
    record.notes = notes or record.notes
    record.marked_by = user
    record.marked_at = now
    record.is_locked = True
    if model is StudentDailyAttendance and not record.check_in_time:
        record.check_in_time = now
    record.save()
    return False


# ---------------------------------------------------------------------------
#  Direct updates (only while unlocked)
# ---------------------------------------------------------------------------

def update_attendance(attendance_id, patch):
    """Patch an unlocked schedule-based record; the record is locked afterwards."""
    with transaction.atomic():
        record = _get_unlocked(ScheduleBasedAttendance, attendance_id)
        if "status" in patch:
            record.status = _clean_status(ScheduleBasedAttendance, patch["status"])
        if "notes" in patch:
            record.notes = patch["notes"]
        record.marked_at = timezone.now()
        record.is_locked = True
        record.save()

    logger.info("Attendance record %s updated", attendance_id)
    return record


def update_student_daily_attendance(attendance_id, patch):
    """Patch an unlocked daily record; ``check_in_time``/``check_out_time`` may be times of day."""
    with transaction.atomic():
        record = _get_unlocked(StudentDailyAttendance, attendance_id)
        if "status" in patch:
            record.status = _clean_status(StudentDailyAttendance, patch["status"])
        if "notes" in patch:
            record.notes = patch["notes"]
        for field in ("check_in_time", "check_out_time"):
            if field in patch:
                setattr(record, field, on_record_date(record.date, patch[field]))
        record.marked_at = timezone.now()
        record.is_locked = True
        record.save()

    logger.info("Student daily attendance record %s updated", attendance_id)
    return record


def _get_unlocked(model, attendance_id):
    record = model.objects.select_for_update().filter(pk=attendance_id).first()
    if record is None:
        raise NotFound("Attendance record not found")
    if record.is_locked:
        raise AttendanceLocked()
    return record


# ---------------------------------------------------------------------------
#  Edit requests
# ---------------------------------------------------------------------------

def create_edit_request(user, *, attendance_id, attendance_type, proposed_changes, reason):
    """File a PENDING edit request against a locked record the user marked."""
    model = get_record_model(attendance_type)
    record = get_record(attendance_type, attendance_id)

    if not record.is_locked:
        raise BadRequest("Attendance record is not locked. You can edit it directly.")
    if record.marked_by_id != user.pk:
        raise Forbidden("You can only request edits for attendance records you created")
    if _pending_requests(attendance_id, model.attendance_type).exists():
        raise BadRequest("A pending edit request already exists for this attendance record")

    changes = normalize_changes(model, proposed_changes, record.date)
    reason = (reason or "").strip()
    if not reason:
        raise BadRequest("A reason is required for an edit request")

    try:
        with transaction.atomic():
            edit_request = AttendanceEditRequest.objects.create(
                attendance_id=record.pk,
                attendance_type=model.attendance_type,
                requested_by=user,
                proposed_changes=changes,
                reason=reason,
                status=EditRequestStatus.PENDING,
            )
    except IntegrityError:
        # Lost the race against a concurrent request for the same record.
        raise BadRequest("A pending edit request already exists for this attendance record")

    logger.info(
        "Edit request created: request_id=%s, attendance_id=%s, type=%s, requested_by=%s",
        edit_request.pk, record.pk, model.attendance_type, user.pk,
    )
    return {"request_id": edit_request.pk}


def _pending_requests(attendance_id, attendance_type):
    return AttendanceEditRequest.objects.filter(
        attendance_id=attendance_id,
        attendance_type=attendance_type,
        status=EditRequestStatus.PENDING,
    )


def list_my_edit_requests(user):
    return (
        AttendanceEditRequest.objects.filter(requested_by=user)
        .select_related("reviewed_by")
        .newest_first()
    )


def list_edit_requests(status=None):
    qs = AttendanceEditRequest.objects.select_related("requested_by", "reviewed_by")
    if status:
        qs = qs.filter(status=status.upper())
    return qs.newest_first()


def review_edit_request(request_id, admin, *, status, admin_comment=None):
    """Approve or reject a PENDING edit request.

    Approval applies the proposed changes unless the record was modified after
    the request was filed (``record.updated_at > request.created_at``), in
    which case StaleEditRequest is raised and nothing changes.
    """
    status = (status or "").upper()
    if status not in (EditRequestStatus.APPROVED, EditRequestStatus.REJECTED):
        raise BadRequest("Status must be APPROVED or REJECTED")
    comment = (admin_comment or "").strip() or None

    with transaction.atomic():
        edit_request = AttendanceEditRequest.objects.select_for_update().filter(pk=request_id).first()
        if edit_request is None:
            raise NotFound("Edit request not found")
        if not edit_request.is_pending:
            raise BadRequest(f"Cannot review request with status: {edit_request.status}")
        if status == EditRequestStatus.REJECTED and not comment:
            raise BadRequest("Admin comment is required when rejecting a request")

        if status == EditRequestStatus.APPROVED:
            _apply_edit_request(edit_request)

        edit_request.status = status
        edit_request.reviewed_by = admin
        edit_request.reviewed_at = timezone.now()
        edit_request.admin_comment = comment
        edit_request.save()

    logger.info(
        "Edit request %s: request_id=%s, reviewed_by=%s, attendance_id=%s, requested_by=%s",
        status.lower(), edit_request.pk, admin.pk, edit_request.attendance_id, edit_request.requested_by_id,
    )
    return {"request_id": edit_request.pk, "status": status}


def _apply_edit_request(edit_request):
    record = get_record(edit_request.attendance_type, edit_request.attendance_id, for_update=True)

    if record.updated_at and edit_request.created_at and record.updated_at > edit_request.created_at:
        logger.warning(
            "Edit request %s is stale: attendance %s was modified after request creation",
            edit_request.pk, edit_request.attendance_id,
        )
        raise StaleEditRequest()

    changes = dict(edit_request.proposed_changes)
    if isinstance(changes.get("status"), str):
        changes["status"] = changes["status"].upper()

    try:
        record.apply_changes(to_model_values(type(record), changes, record.date))
    except ValueError as exc:
        raise BadRequest(str(exc))

    logger.info(
        "Attendance updated via approved edit request: attendance_id=%s, type=%s, changes=%s",
        record.pk, edit_request.attendance_type, changes,
    )
    return record
