# attendance/tests/test_reports.py
from datetime import date

from django.test import TestCase

from attendance import reports
from core.exceptions import BadRequest, Forbidden, NotFound
from .base import SchoolDataMixin


class WeekdayCountTests(TestCase):

    def test_counts_monday_to_friday_inclusive(self):
        self.assertEqual(reports.count_weekdays(date(2025, 9, 1), date(2025, 9, 7)), 5)
        self.assertEqual(reports.count_weekdays(date(2025, 9, 1), date(2025, 12, 19)), 80)

    def test_weekend_only_and_reversed_ranges(self):
        self.assertEqual(reports.count_weekdays(date(2025, 9, 6), date(2025, 9, 7)), 0)
        self.assertEqual(reports.count_weekdays(date(2025, 9, 7), date(2025, 9, 1)), 0)


class StudentMonthlyAttendanceTests(SchoolDataMixin, TestCase):

    def setUp(self):
        super().setUp()
        statuses = {
            date(2025, 10, 1): "PRESENT",
            date(2025, 10, 2): "LATE",
            date(2025, 10, 3): "ABSENT",
            date(2025, 10, 6): "EXCUSED",
            date(2025, 10, 7): "HALF_DAY",
            date(2025, 11, 3): "ABSENT",
        }
        for day, status in statuses.items():
            self.make_daily_record(day=day, status=status)

    def test_counts_for_month(self):
        summary = reports.student_monthly_attendance(self.students[0].pk, on=date(2025, 10, 15))

        self.assertEqual(summary["month"], "October")
        self.assertEqual(summary["year"], 2025)
        self.assertEqual(summary["total_days_in_month"], 31)
        self.assertEqual(summary["days_present"], 2)
        self.assertEqual(summary["days_late"], 1)
        self.assertEqual(summary["days_absent"], 1)
        self.assertEqual(summary["days_excused"], 1)
        self.assertEqual(summary["days_half_day"], 1)
        self.assertEqual([d["date"] for d in summary["attendance_details"]][:2], ["2025-10-01", "2025-10-02"])
        self.assertEqual(len(summary["attendance_details"]), 5)

    def test_february_length(self):
        summary = reports.student_monthly_attendance(self.students[0].pk, on=date(2028, 2, 10))
        self.assertEqual(summary["total_days_in_month"], 29)
        self.assertEqual(summary["attendance_details"], [])

    def test_repeated_calls_are_identical(self):
        first = reports.student_monthly_attendance(self.students[0].pk, on=date(2025, 10, 15))
        second = reports.student_monthly_attendance(self.students[0].pk, on=date(2025, 10, 15))
        self.assertEqual(first, second)

    def test_parent_lookup_by_registration_number(self):
        summary = reports.parent_child_monthly_attendance(
            "REG-001", parent=self.parent, on=date(2025, 10, 15),
        )
        self.assertEqual(summary["registration_number"], "REG-001")
        self.assertEqual(summary["days_present"], 2)

    def test_parent_lookup_errors(self):
        with self.assertRaises(BadRequest):
            reports.parent_child_monthly_attendance("  ")
        with self.assertRaises(NotFound):
            reports.parent_child_monthly_attendance("REG-404")
        with self.assertRaises(Forbidden):
            reports.parent_child_monthly_attendance("REG-002", parent=self.parent)


class TermSummaryTests(SchoolDataMixin, TestCase):

    def test_student_term_summary(self):
        self.make_daily_record(day=date(2025, 9, 1), status="PRESENT")
        self.make_daily_record(day=date(2025, 9, 2), status="LATE")
        self.make_daily_record(day=date(2025, 9, 3), status="ABSENT")
        self.make_daily_record(day=date(2025, 9, 4), status="EXCUSED")
        self.make_daily_record(day=date(2026, 1, 5), status="ABSENT")

        summary = reports.student_term_summary(self.students[0].pk, self.session.pk, "first")

        self.assertEqual(summary["term"], "FIRST")
        self.assertEqual(summary["total_school_days"], 80)
        self.assertEqual(summary["days_present"], 2)
        self.assertEqual(summary["days_absent"], 1)

    def test_unknown_term(self):
        with self.assertRaises(NotFound):
            reports.student_term_summary(self.students[0].pk, self.session.pk, "THIRD")

    def test_class_term_attendance(self):
        self.make_daily_record(self.students[0], day=date(2025, 9, 1), status="PRESENT")
        self.make_daily_record(self.students[0], day=date(2025, 9, 2), status="LATE")
        self.make_daily_record(self.students[1], day=date(2025, 9, 2), status="ABSENT")
        self.make_daily_record(self.students[1], day=date(2025, 9, 3), status="EXCUSED")

        result = reports.class_term_attendance(self.class_program.pk, self.session.pk, "FIRST")

        self.assertEqual(result["summary"], {"total_students": 3, "total_school_days": 3})
        rows = {row["student_id"]: row for row in result["students"]}
        hana = rows[self.students[0].pk]
        self.assertEqual(hana["days_present"], 2)
        self.assertEqual([d["was_late"] for d in hana["attendance_details"]], [False, True])
        yonas = rows[self.students[1].pk]
        self.assertEqual((yonas["days_absent"], yonas["days_excused"]), (1, 1))
        self.assertEqual(rows[self.students[2].pk]["attendance_details"], [])


class ClassDailyAttendanceTests(SchoolDataMixin, TestCase):

    def test_roster_with_summary(self):
        day = date(2025, 10, 6)
        self.make_daily_record(self.students[0], day=day, status="PRESENT")
        self.make_daily_record(self.students[1], day=day, status="LATE")

        result = reports.class_daily_attendance(self.class_program.pk, day)

        self.assertEqual(len(result["students"]), 3)
        self.assertEqual(result["summary"]["present_count"], 1)
        self.assertEqual(result["summary"]["late_count"], 1)
        self.assertEqual(result["summary"]["not_marked_count"], 1)
        unmarked = [s for s in result["students"] if s["status"] is None]
        self.assertEqual([s["student_id"] for s in unmarked], [self.students[2].pk])

    def test_empty_class(self):
        self.class_program.enrollments.update(is_active=False)
        with self.assertRaises(NotFound):
            reports.class_daily_attendance(self.class_program.pk, date(2025, 10, 6))


class ScheduleReportTests(SchoolDataMixin, TestCase):

    def test_marked_status_and_records(self):
        day = date(2025, 10, 6)
        self.assertEqual(reports.is_attendance_marked(self.schedule.pk, day), {"is_marked": False, "count": 0})

        self.make_schedule_record(self.students[0], day=day)
        self.make_schedule_record(self.students[1], day=day, status="ABSENT")

        self.assertEqual(reports.is_attendance_marked(self.schedule.pk, day), {"is_marked": True, "count": 2})
        self.assertEqual(reports.get_schedule_attendance(self.schedule.pk, day).count(), 2)

    def test_filtering(self):
        self.make_schedule_record(self.students[0], day=date(2025, 10, 6))
        self.make_schedule_record(self.students[0], day=date(2025, 10, 13), status="ABSENT")
        self.make_schedule_record(self.students[1], day=date(2025, 10, 13))

        self.assertEqual(reports.filter_attendance_records(student_id=self.students[0].pk).count(), 2)
        self.assertEqual(reports.filter_attendance_records(status="absent").count(), 1)
        self.assertEqual(reports.filter_attendance_records(start_date=date(2025, 10, 10)).count(), 2)
        self.assertEqual(
            reports.filter_attendance_records(schedule_id=self.schedule.pk, end_date=date(2025, 10, 6)).count(), 1,
        )
