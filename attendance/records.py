"""Dispatch from an ``AttendanceType`` tag to the concrete record model.

Both record kinds expose the same capability (fetch by id, ``is_locked``,
``apply_changes``) through ``BaseAttendance``; callers resolve the model here
before running any generic logic.
"""
from datetime import datetime, time

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_time

from core.exceptions import BadRequest, NotFound
from .models import AttendanceType, ScheduleBasedAttendance, StudentDailyAttendance

RECORD_MODELS = {
    AttendanceType.SCHEDULE_BASED: ScheduleBasedAttendance,
    AttendanceType.DAILY: StudentDailyAttendance,
}


def get_record_model(attendance_type):
    try:
        return RECORD_MODELS[AttendanceType(attendance_type)]
    except ValueError:
        raise BadRequest(f"Unknown attendance type: {attendance_type}")


def get_record(attendance_type, attendance_id, *, for_update=False):
    model = get_record_model(attendance_type)
    qs = model.objects.select_for_update() if for_update else model.objects.all()
    record = qs.filter(pk=attendance_id).first()
    if record is None:
        raise NotFound("Attendance record not found. The record may have been deleted or does not exist.")
    return record


def normalize_changes(model, changes, day=None):
    """Validate proposed changes against ``model`` and canonicalise the status casing.

    ``day`` is the record's date; check-in/out values given as a time of day
    are resolved against it. Returns a new JSON-safe dict; raises BadRequest
    for empty payloads, fields the record kind does not allow editing,
    statuses outside its enum, or values the model field cannot parse.
    """
    if not changes:
        raise BadRequest("proposed_changes must contain at least one field")

    unknown = sorted(set(changes) - set(model.editable_fields))
    if unknown:
        raise BadRequest(f"Cannot edit field(s): {', '.join(unknown)}")

    normalized = dict(changes)
    status = normalized.get("status")
    if isinstance(status, str):
        normalized["status"] = status.upper()
    if "status" in normalized and normalized["status"] not in model.status_choices.values:
        raise BadRequest(f"Invalid status: {changes['status']}")

    to_model_values(model, normalized, day)
    return normalized


def to_model_values(model, changes, day=None):
    """Convert JSON values (ISO datetimes, times of day) to Python values for ``model``."""
    values = {}
    for name, value in changes.items():
        field = model._meta.get_field(name)
        try:
            if value is None:
                values[name] = None
            elif isinstance(field, models.DateTimeField):
                values[name] = on_record_date(day, _time_of_day(value) or field.to_python(value))
            else:
                values[name] = field.to_python(value)
        except ValidationError as exc:
            raise BadRequest(f"Invalid value for {name}: {'; '.join(exc.messages)}")
    return values


def on_record_date(day, value):
    """Return ``value`` as an aware datetime; a bare time is placed on ``day``."""
    if value is None:
        return None
    if isinstance(value, time):
        value = datetime.combine(day, value)
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def _time_of_day(value):
    if not isinstance(value, str):
        return None
    try:
        return parse_time(value)
    except ValueError:
        raise ValidationError(f"{value!r} is not a valid time.")
