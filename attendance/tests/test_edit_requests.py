# attendance/tests/test_edit_requests.py
from datetime import datetime, time, timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from attendance import services
from attendance.exceptions import StaleEditRequest
from attendance.models import (
    AttendanceEditRequest,
    AttendanceType,
    ScheduleBasedAttendance,
    StudentDailyAttendance,
)
from core.exceptions import BadRequest, Forbidden, NotFound
from .base import SchoolDataMixin

User = get_user_model()


class CreateEditRequestTests(SchoolDataMixin, TestCase):

    def request_edit(self, record, changes=None, user=None, attendance_type=AttendanceType.SCHEDULE_BASED,
                     reason="Marked the wrong student"):
        return services.create_edit_request(
            user or self.teacher_user,
            attendance_id=record.pk,
            attendance_type=attendance_type,
            proposed_changes=changes if changes is not None else {"status": "absent"},
            reason=reason,
        )

    def test_creates_pending_request_with_normalised_status(self):
        record = self.make_schedule_record()

        result = self.request_edit(record)

        edit_request = AttendanceEditRequest.objects.get(pk=result["request_id"])
        self.assertEqual(edit_request.status, "PENDING")
        self.assertEqual(edit_request.proposed_changes, {"status": "ABSENT"})
        self.assertEqual(edit_request.requested_by, self.teacher_user)
        self.assertEqual(edit_request.attendance_type, AttendanceType.SCHEDULE_BASED)

    def test_unlocked_record_should_be_edited_directly(self):
        record = self.make_schedule_record(locked=False)
        with self.assertRaises(BadRequest):
            self.request_edit(record)

    def test_only_the_marking_user_may_request(self):
        record = self.make_schedule_record()
        with self.assertRaises(Forbidden):
            self.request_edit(record, user=self.other_teacher_user)

    def test_second_pending_request_is_rejected(self):
        record = self.make_schedule_record()
        self.request_edit(record)
        with self.assertRaises(BadRequest):
            self.request_edit(record, changes={"notes": "Another try"})
        self.assertEqual(AttendanceEditRequest.objects.count(), 1)

    def test_same_id_in_other_record_table_is_independent(self):
        schedule_record = self.make_schedule_record()
        daily_record = self.make_daily_record()
        self.request_edit(schedule_record)

        # Ids may collide across the two tables; pending uniqueness is per (id, type).
        AttendanceEditRequest.objects.filter(attendance_id=schedule_record.pk).update(attendance_id=daily_record.pk)
        self.request_edit(daily_record, attendance_type=AttendanceType.DAILY)
        self.assertEqual(AttendanceEditRequest.objects.filter(status="PENDING").count(), 2)

    def test_missing_record(self):
        with self.assertRaises(NotFound):
            services.create_edit_request(
                self.teacher_user, attendance_id=999999, attendance_type="SCHEDULE_BASED",
                proposed_changes={"status": "ABSENT"}, reason="x",
            )

    def test_unknown_attendance_type(self):
        record = self.make_schedule_record()
        with self.assertRaises(BadRequest):
            self.request_edit(record, attendance_type="WEEKLY")

    def test_proposed_changes_are_validated(self):
        record = self.make_schedule_record()
        for changes in ({}, {"date": "2025-01-01"}, {"status": "HALF_DAY"}, {"is_locked": False}):
            with self.subTest(changes=changes), self.assertRaises(BadRequest):
                self.request_edit(record, changes=changes)
        self.assertFalse(AttendanceEditRequest.objects.exists())

    def test_daily_record_accepts_time_changes(self):
        record = self.make_daily_record()
        result = self.request_edit(
            record,
            changes={"check_out_time": "2025-10-06T15:30:00+00:00"},
            attendance_type=AttendanceType.DAILY,
        )
        self.assertTrue(AttendanceEditRequest.objects.filter(pk=result["request_id"]).exists())

    def test_blank_reason_is_rejected(self):
        record = self.make_schedule_record()
        with self.assertRaises(BadRequest):
            self.request_edit(record, reason="   ")

    def test_listing_own_requests_newest_first(self):
        first = self.make_schedule_record(self.students[0])
        second = self.make_schedule_record(self.students[1])
        self.request_edit(first)
        latest = self.request_edit(second)

        mine = list(services.list_my_edit_requests(self.teacher_user))
        self.assertEqual(len(mine), 2)
        self.assertEqual(mine[0].pk, latest["request_id"])
        self.assertFalse(services.list_my_edit_requests(self.other_teacher_user).exists())


class ReviewEditRequestTests(SchoolDataMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.record = self.make_schedule_record(status="PRESENT")
        self.request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=self.record.pk,
            attendance_type=AttendanceType.SCHEDULE_BASED,
            proposed_changes={"status": "ABSENT", "notes": "Left after roll call"},
            reason="Student left",
        )["request_id"]

    def test_approval_applies_changes_and_keeps_lock(self):
        result = services.review_edit_request(self.request_id, self.admin, status="approved")

        self.assertEqual(result, {"request_id": self.request_id, "status": "APPROVED"})
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, "ABSENT")
        self.assertEqual(self.record.notes, "Left after roll call")
        self.assertTrue(self.record.is_locked)

        edit_request = AttendanceEditRequest.objects.get(pk=self.request_id)
        self.assertEqual(edit_request.reviewed_by, self.admin)
        self.assertIsNotNone(edit_request.reviewed_at)

    def test_rejection_requires_comment(self):
        with self.assertRaises(BadRequest):
            services.review_edit_request(self.request_id, self.admin, status="REJECTED", admin_comment="  ")
        self.assertEqual(AttendanceEditRequest.objects.get(pk=self.request_id).status, "PENDING")

    def test_rejection_leaves_record_untouched(self):
        services.review_edit_request(self.request_id, self.admin, status="REJECTED", admin_comment="No evidence")

        self.record.refresh_from_db()
        self.assertEqual(self.record.status, "PRESENT")
        edit_request = AttendanceEditRequest.objects.get(pk=self.request_id)
        self.assertEqual(edit_request.status, "REJECTED")
        self.assertEqual(edit_request.admin_comment, "No evidence")

    def test_request_can_only_be_reviewed_once(self):
        services.review_edit_request(self.request_id, self.admin, status="APPROVED")
        with self.assertRaises(BadRequest):
            services.review_edit_request(self.request_id, self.admin, status="REJECTED", admin_comment="Too late")

    def test_invalid_decision(self):
        with self.assertRaises(BadRequest):
            services.review_edit_request(self.request_id, self.admin, status="PENDING")

    def test_missing_request(self):
        with self.assertRaises(NotFound):
            services.review_edit_request(999999, self.admin, status="APPROVED")

    def test_stale_request_is_not_applied(self):
        edit_request = AttendanceEditRequest.objects.get(pk=self.request_id)
        # An admin edited the record directly after the request was filed.
        ScheduleBasedAttendance.objects.filter(pk=self.record.pk).update(
            status="LATE", updated_at=edit_request.created_at + timedelta(seconds=1),
        )

        with self.assertRaises(StaleEditRequest):
            services.review_edit_request(self.request_id, self.admin, status="APPROVED")

        self.record.refresh_from_db()
        self.assertEqual(self.record.status, "LATE")
        self.assertEqual(AttendanceEditRequest.objects.get(pk=self.request_id).status, "PENDING")

    def test_stale_request_can_still_be_rejected(self):
        edit_request = AttendanceEditRequest.objects.get(pk=self.request_id)
        ScheduleBasedAttendance.objects.filter(pk=self.record.pk).update(
            updated_at=edit_request.created_at + timedelta(seconds=1),
        )
        result = services.review_edit_request(
            self.request_id, self.admin, status="REJECTED", admin_comment="Already corrected",
        )
        self.assertEqual(result["status"], "REJECTED")

    def test_new_request_allowed_after_review(self):
        services.review_edit_request(self.request_id, self.admin, status="REJECTED", admin_comment="No")
        result = services.create_edit_request(
            self.teacher_user,
            attendance_id=self.record.pk,
            attendance_type=AttendanceType.SCHEDULE_BASED,
            proposed_changes={"status": "EXCUSED"},
            reason="Medical note received",
        )
        self.assertNotEqual(result["request_id"], self.request_id)

    def test_record_deleted_before_approval(self):
        ScheduleBasedAttendance.objects.filter(pk=self.record.pk).delete()
        with self.assertRaises(NotFound):
            services.review_edit_request(self.request_id, self.admin, status="APPROVED")

    def test_admin_listing_filters_by_status(self):
        services.review_edit_request(self.request_id, self.admin, status="APPROVED")
        self.assertEqual(services.list_edit_requests("approved").count(), 1)
        self.assertEqual(services.list_edit_requests("PENDING").count(), 0)
        self.assertEqual(services.list_edit_requests().count(), 1)


class DailyEditRequestTests(SchoolDataMixin, TestCase):

    def test_approved_time_change_is_parsed(self):
        record = self.make_daily_record(status="PRESENT")
        request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=record.pk,
            attendance_type=AttendanceType.DAILY,
            proposed_changes={"status": "half_day", "check_out_time": "2025-10-06T12:00:00+00:00"},
            reason="Went home at noon",
        )["request_id"]

        services.review_edit_request(request_id, self.admin, status="APPROVED")

        record = StudentDailyAttendance.objects.get(pk=record.pk)
        self.assertEqual(record.status, "HALF_DAY")
        self.assertEqual(record.check_out_time.hour, 12)

    def test_time_of_day_is_placed_on_record_date(self):
        record = self.make_daily_record(status="PRESENT")
        request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=record.pk,
            attendance_type=AttendanceType.DAILY,
            proposed_changes={"check_out_time": "12:00:00"},
            reason="Left after lunch",
        )["request_id"]

        services.review_edit_request(request_id, self.admin, status="APPROVED")

        record = StudentDailyAttendance.objects.get(pk=record.pk)
        self.assertTrue(timezone.is_aware(record.check_out_time))
        self.assertEqual(record.check_out_time, timezone.make_aware(datetime.combine(record.date, time(12, 0))))

    def test_naive_datetime_is_made_aware(self):
        record = self.make_daily_record(status="LATE")
        request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=record.pk,
            attendance_type=AttendanceType.DAILY,
            proposed_changes={"check_in_time": f"{record.date.isoformat()}T09:30:00"},
            reason="Signed in at the gate",
        )["request_id"]

        services.review_edit_request(request_id, self.admin, status="APPROVED")

        record = StudentDailyAttendance.objects.get(pk=record.pk)
        self.assertTrue(timezone.is_aware(record.check_in_time))
        self.assertEqual(record.check_in_time, timezone.make_aware(datetime.combine(record.date, time(9, 30))))

    def test_invalid_time_is_rejected(self):
        record = self.make_daily_record()
        with self.assertRaises(BadRequest):
            services.create_edit_request(
                self.teacher_user,
                attendance_id=record.pk,
                attendance_type=AttendanceType.DAILY,
                proposed_changes={"check_out_time": "25:00"},
                reason="Typo",
            )
        self.assertFalse(AttendanceEditRequest.objects.exists())


class AdminEditStalenessTests(SchoolDataMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.superuser = User.objects.create_superuser("root", password="testpass123")
        self.record = self.make_schedule_record(status="PRESENT")
        self.request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=self.record.pk,
            attendance_type=AttendanceType.SCHEDULE_BASED,
            proposed_changes={"status": "ABSENT"},
            reason="Student was sick",
        )["request_id"]

    def edit_in_admin(self, status):
        self.client.force_login(self.superuser)
        marked_at = timezone.localtime(self.record.marked_at)
        return self.client.post(
            reverse("admin:attendance_schedulebasedattendance_change", args=[self.record.pk]),
            {
                "student": self.record.student_id,
                "session": self.session.pk,
                "date": self.record.date.isoformat(),
                "marked_by": self.teacher_user.pk,
                "marked_at_0": marked_at.date().isoformat(),
                "marked_at_1": marked_at.strftime("%H:%M:%S"),
                "notes": "",
                "is_locked": "on",
                "schedule": self.schedule.pk,
                "status": status,
                "_save": "Save",
            },
        )

    def test_admin_change_makes_pending_request_stale(self):
        response = self.edit_in_admin("LATE")
        self.assertEqual(response.status_code, 302)

        with self.assertRaises(StaleEditRequest):
            services.review_edit_request(self.request_id, self.admin, status="APPROVED")

        self.record.refresh_from_db()
        self.assertEqual(self.record.status, "LATE")
        self.assertEqual(AttendanceEditRequest.objects.get(pk=self.request_id).status, "PENDING")
