# attendance/tests/test_api.py
from datetime import date, timedelta

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from attendance.models import AttendanceEditRequest, ScheduleBasedAttendance
from .base import SchoolDataMixin


class MarkAttendanceApiTests(SchoolDataMixin, APITestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse("attendance:mark")

    def payload(self, **overrides):
        data = {
            "schedule_id": self.schedule.pk,
            "date": self.today.isoformat(),
            "records": [{"student_id": s.pk, "status": "PRESENT"} for s in self.students],
        }
        data.update(overrides)
        return data

    def test_teacher_marks_schedule(self):
        self.client.force_authenticate(self.teacher_user)
        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Attendance marked successfully")
        self.assertEqual(response.data["data"], {"marked": 3, "updated": 0, "total": 3})

    def test_locked_record_returns_conflict(self):
        self.client.force_authenticate(self.teacher_user)
        self.client.post(self.url, self.payload(), format="json")

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["status_code"], 409)
        self.assertIn("locked", response.data["message"])

    def test_other_teacher_is_forbidden(self):
        self.client.force_authenticate(self.other_teacher_user)
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(ScheduleBasedAttendance.objects.exists())

    def test_admin_role_cannot_mark(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_rejected(self):
        response = self.client.post(self.url, self.payload(), format="json")
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_both_targets_is_a_validation_error(self):
        self.client.force_authenticate(self.teacher_user)
        response = self.client.post(self.url, self.payload(class_id=self.class_program.pk), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_future_date(self):
        self.client.force_authenticate(self.teacher_user)
        tomorrow = (self.today + timedelta(days=1)).isoformat()
        response = self.client.post(self.url, self.payload(date=tomorrow), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_not_enrolled_student_returns_not_found(self):
        self.client.force_authenticate(self.teacher_user)
        records = [{"student_id": self.outsider.pk, "status": "PRESENT"}]
        response = self.client.post(self.url, self.payload(records=records), format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class EditRequestApiTests(SchoolDataMixin, APITestCase):

    def setUp(self):
        super().setUp()
        self.record = self.make_schedule_record(status="PRESENT")

    def file_request(self):
        self.client.force_authenticate(self.teacher_user)
        return self.client.post(
            reverse("attendance:edit_requests"),
            {
                "attendance_id": self.record.pk,
                "attendance_type": "SCHEDULE_BASED",
                "proposed_changes": {"status": "ABSENT"},
                "reason": "Wrong student ticked",
            },
            format="json",
        )

    def test_full_workflow(self):
        response = self.file_request()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        request_id = response.data["data"]["request_id"]

        duplicate = self.file_request()
        self.assertEqual(duplicate.status_code, status.HTTP_400_BAD_REQUEST)

        mine = self.client.get(reverse("attendance:my_edit_requests"))
        self.assertEqual(mine.status_code, status.HTTP_200_OK)
        self.assertEqual(mine.data["meta"]["total"], 1)
        self.assertIsNone(mine.data["data"][0]["reviewer"])

        self.client.force_authenticate(self.admin)
        listing = self.client.get(reverse("attendance:edit_requests"), {"status": "PENDING"})
        self.assertEqual(listing.data["meta"]["total"], 1)

        review = self.client.post(
            reverse("attendance:review_edit_request", args=[request_id]), {"status": "APPROVED"}, format="json",
        )
        self.assertEqual(review.status_code, status.HTTP_200_OK)
        self.assertEqual(review.data["data"]["status"], "APPROVED")

        self.record.refresh_from_db()
        self.assertEqual(self.record.status, "ABSENT")

        self.client.force_authenticate(self.teacher_user)
        mine = self.client.get(reverse("attendance:my_edit_requests"))
        self.assertEqual(mine.data["data"][0]["reviewer"]["id"], self.admin.pk)

    def test_teacher_cannot_review_or_list_all(self):
        request_id = self.file_request().data["data"]["request_id"]

        review = self.client.post(
            reverse("attendance:review_edit_request", args=[request_id]), {"status": "APPROVED"}, format="json",
        )
        self.assertEqual(review.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse("attendance:edit_requests")).status_code, status.HTTP_403_FORBIDDEN)

    def test_reject_without_comment(self):
        request_id = self.file_request().data["data"]["request_id"]
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            reverse("attendance:review_edit_request", args=[request_id]), {"status": "REJECTED"}, format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(AttendanceEditRequest.objects.get(pk=request_id).status, "PENDING")

    def test_stale_approval_is_bad_request(self):
        request_id = self.file_request().data["data"]["request_id"]
        created_at = AttendanceEditRequest.objects.get(pk=request_id).created_at
        ScheduleBasedAttendance.objects.filter(pk=self.record.pk).update(updated_at=created_at + timedelta(seconds=1))

        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("attendance:review_edit_request", args=[request_id]), {"status": "APPROVED"}, format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("stale", response.data["message"])

    def test_direct_patch_of_locked_record(self):
        self.client.force_authenticate(self.teacher_user)
        response = self.client.patch(
            reverse("attendance:record_update", args=[self.record.pk]), {"status": "ABSENT"}, format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class ReportApiTests(SchoolDataMixin, APITestCase):

    def test_class_daily_roster(self):
        day = date(2025, 10, 6)
        self.make_daily_record(self.students[0], day=day, status="PRESENT")
        self.client.force_authenticate(self.teacher_user)

        response = self.client.get(reverse("attendance:class_daily", args=[self.class_program.pk]), {"date": day})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["summary"]["not_marked_count"], 2)

    def test_missing_date_query_param(self):
        self.client.force_authenticate(self.teacher_user)
        response = self.client.get(reverse("attendance:schedule_status", args=[self.schedule.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_student_history_is_paginated(self):
        for offset in range(3):
            self.make_schedule_record(day=date(2025, 10, 6) + timedelta(days=7 * offset))
        self.client.force_authenticate(self.admin)

        response = self.client.get(reverse("attendance:student_history", args=[self.students[0].pk]), {"limit": 2})

        self.assertEqual(response.data["meta"]["total"], 3)
        self.assertEqual(response.data["meta"]["total_pages"], 2)
        self.assertTrue(response.data["meta"]["has_next"])
        self.assertEqual(len(response.data["data"]), 2)

    def test_parent_sees_only_own_child(self):
        self.client.force_authenticate(self.parent)

        own = self.client.get(reverse("attendance:student_monthly", args=[self.students[0].pk]))
        other = self.client.get(reverse("attendance:student_monthly", args=[self.students[1].pk]))

        self.assertEqual(own.status_code, status.HTTP_200_OK)
        self.assertEqual(other.status_code, status.HTTP_403_FORBIDDEN)

    def test_child_monthly_by_registration_number(self):
        self.make_daily_record(day=date(2025, 10, 6), status="LATE")
        self.client.force_authenticate(self.parent)

        response = self.client.get(
            reverse("attendance:child_monthly", args=["REG-001"]), {"date": "2025-10-20"},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["days_present"], 1)
        self.assertEqual(response.data["data"]["days_late"], 1)

    def test_term_summary_requires_session_and_term(self):
        self.client.force_authenticate(self.admin)
        url = reverse("attendance:student_term", args=[self.students[0].pk])

        self.assertEqual(self.client.get(url).status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get(url, {"session_id": self.session.pk, "term": "FIRST"})
        self.assertEqual(response.data["data"]["total_school_days"], 80)
