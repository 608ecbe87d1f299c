# attendance/reports.py
"""Read-only attendance summaries. Nothing here writes to the database."""
import calendar
from collections import Counter
from datetime import timedelta

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, FR, MO, TH, TU, WE, rrule
from django.utils import timezone

from academics.models import Term
from academics.services import get_active_session
from classes_app.services import active_enrollments
from core.exceptions import BadRequest, Forbidden, NotFound
from students.models import Student
from .models import DailyAttendanceStatus, ScheduleBasedAttendance, StudentDailyAttendance

PRESENT_STATUSES = (DailyAttendanceStatus.PRESENT, DailyAttendanceStatus.LATE)


def filter_attendance_records(*, schedule_id=None, student_id=None, status=None,
                              start_date=None, end_date=None):
    qs = ScheduleBasedAttendance.objects.select_related("schedule", "student")
    if schedule_id:
        qs = qs.filter(schedule_id=schedule_id)
    if student_id:
        qs = qs.filter(student_id=student_id)
    if status:
        qs = qs.filter(status=status.upper())
    if start_date:
        qs = qs.filter(date__gte=start_date)
    if end_date:
        qs = qs.filter(date__lte=end_date)
    return qs.order_by("-date", "-created_at")


def get_schedule_attendance(schedule_id, date):
    return (
        ScheduleBasedAttendance.objects.filter(schedule_id=schedule_id, date=date)
        .select_related("student")
        .order_by("-created_at")
    )


def is_attendance_marked(schedule_id, date):
    count = ScheduleBasedAttendance.objects.filter(schedule_id=schedule_id, date=date).count()
    return {"is_marked": count > 0, "count": count}


def count_weekdays(start, end):
    """Monday-Friday days between ``start`` and ``end`` inclusive."""
    if end < start:
        return 0
    return rrule(DAILY, dtstart=start, until=end, byweekday=(MO, TU, WE, TH, FR)).count()


def _iso(value):
    return value.isoformat() if value else None


def _daily_detail(record):
    return {
        "date": record.date.isoformat(),
        "status": record.status,
        "check_in_time": _iso(record.check_in_time),
        "check_out_time": _iso(record.check_out_time),
        "notes": record.notes,
    }


def student_monthly_attendance(student_id, *, on=None, session_provider=get_active_session):
    """Daily attendance of one student for the calendar month containing ``on``.

    LATE days are counted both as late and as present.
    """
    on = on or timezone.localdate()
    start = on.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    session = session_provider()

    records = list(
        StudentDailyAttendance.objects.filter(
            session=session, student_id=student_id, date__range=(start, end)
        ).order_by("date")
    )
    counts = Counter(r.status for r in records)

    return {
        "month": calendar.month_name[start.month],
        "year": start.year,
        "student_id": student_id,
        "total_days_in_month": end.day,
        "days_present": counts[DailyAttendanceStatus.PRESENT] + counts[DailyAttendanceStatus.LATE],
        "days_absent": counts[DailyAttendanceStatus.ABSENT],
        "days_late": counts[DailyAttendanceStatus.LATE],
        "days_excused": counts[DailyAttendanceStatus.EXCUSED],
        "days_half_day": counts[DailyAttendanceStatus.HALF_DAY],
        "attendance_details": [_daily_detail(r) for r in records],
    }


def parent_child_monthly_attendance(registration_number, *, parent=None, on=None,
                                    session_provider=get_active_session):
    if not (registration_number or "").strip():
        raise BadRequest("Registration number is required")

    student = Student.objects.filter(registration_number=registration_number.strip()).first()
    if student is None:
        raise NotFound("No child found with this registration number")
    if parent is not None and student.parent_id != parent.pk:
        raise Forbidden("You can only view attendance for your own children")

    summary = student_monthly_attendance(student.pk, on=on, session_provider=session_provider)
    summary["registration_number"] = student.registration_number
    return summary


def _get_term(session_id, term_name):
    term = Term.objects.filter(session_id=session_id, name=(term_name or "").upper()).first()
    if term is None:
        raise NotFound(f"Term {term_name} not found for session {session_id}")
    return term


def student_term_summary(student_id, session_id, term_name):
    """Present/absent totals for a term against the count of weekdays in it.

    EXCUSED and HALF_DAY records count in neither total.
    """
    term = _get_term(session_id, term_name)
    statuses = StudentDailyAttendance.objects.filter(
        student_id=student_id,
        session_id=session_id,
        date__range=(term.start_date, term.end_date),
    ).values_list("status", flat=True)
    counts = Counter(statuses)

    return {
        "student_id": student_id,
        "session_id": session_id,
        "term": term.name,
        "start_date": term.start_date.isoformat(),
        "end_date": term.end_date.isoformat(),
        "total_school_days": count_weekdays(term.start_date, term.end_date),
        "days_present": sum(counts[s] for s in PRESENT_STATUSES),
        "days_absent": counts[DailyAttendanceStatus.ABSENT],
    }


def class_daily_attendance(class_id, date):
    enrollments = list(active_enrollments(class_id))
    if not enrollments:
        raise NotFound("No students enrolled in this class")

    records = {
        r.student_id: r
        for r in StudentDailyAttendance.objects.filter(class_program_id=class_id, date=date)
    }

    students = []
    for enrollment in enrollments:
        student = enrollment.student
        record = records.get(student.pk)
        row = {
            "student_id": student.pk,
            "first_name": student.first_name,
            "middle_name": student.middle_name,
            "last_name": student.last_name,
            "attendance_id": record.pk if record else None,
            "status": record.status if record else None,
            "check_in_time": _iso(record.check_in_time) if record else None,
            "check_out_time": _iso(record.check_out_time) if record else None,
            "notes": record.notes if record else None,
        }
        students.append(row)

    counts = Counter(r.status for r in records.values())
    marked = sum(1 for e in enrollments if e.student_id in records)
    return {
        "class_id": class_id,
        "date": date.isoformat(),
        "students": students,
        "summary": {
            "total_students": len(enrollments),
            "present_count": counts[DailyAttendanceStatus.PRESENT],
            "absent_count": counts[DailyAttendanceStatus.ABSENT],
            "late_count": counts[DailyAttendanceStatus.LATE],
            "excused_count": counts[DailyAttendanceStatus.EXCUSED],
            "half_day_count": counts[DailyAttendanceStatus.HALF_DAY],
            "not_marked_count": len(enrollments) - marked,
        },
    }


def class_term_attendance(class_id, session_id, term_name):
    """Per-student term totals for a class.

    ``total_school_days`` is the number of distinct dates on which any daily
    record exists for the class within the term.
    """
    term = _get_term(session_id, term_name)
    enrollments = list(active_enrollments(class_id))
    if not enrollments:
        raise NotFound("No students enrolled in this class")

    records = list(
        StudentDailyAttendance.objects.filter(
            class_program_id=class_id,
            date__range=(term.start_date, term.end_date),
        ).order_by("date")
    )
    total_school_days = len({r.date for r in records})

    by_student = {}
    for record in records:
        by_student.setdefault(record.student_id, []).append(record)

    students = []
    for enrollment in enrollments:
        student = enrollment.student
        student_records = by_student.get(student.pk, [])
        counts = Counter(r.status for r in student_records)
        students.append({
            "student_id": student.pk,
            "first_name": student.first_name,
            "middle_name": student.middle_name,
            "last_name": student.last_name,
            "total_school_days": total_school_days,
            "days_present": sum(counts[s] for s in PRESENT_STATUSES),
            "days_absent": counts[DailyAttendanceStatus.ABSENT],
            "days_excused": counts[DailyAttendanceStatus.EXCUSED],
            "attendance_details": [
                {
                    "date": r.date.isoformat(),
                    "status": r.status,
                    "was_late": r.status == DailyAttendanceStatus.LATE,
                }
                for r in student_records
            ],
        })

    return {
        "class_id": class_id,
        "session_id": session_id,
        "term": term.name,
        "start_date": term.start_date.isoformat(),
        "end_date": term.end_date.isoformat(),
        "students": students,
        "summary": {
            "total_students": len(enrollments),
            "total_school_days": total_school_days,
        },
    }
