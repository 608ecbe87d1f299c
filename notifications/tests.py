# notifications/tests.py
from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.db import transaction
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from attendance import services
from attendance.models import AttendanceType
from attendance.tests.base import SchoolDataMixin
from core.exceptions import BadRequest
from .channels import send_telegram_message
from .dispatch import NotificationIntent, deliver, notify
from .models import Notification, NotificationPreference, NotificationType

User = get_user_model()


@override_settings(NOTIFICATIONS_ASYNC=False, TELEGRAM_BOT_TOKEN="test-token")
class DispatchTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.alice = User.objects.create_user("alice", password="testpass123", role=User.Role.ADMIN)
        cls.bob = User.objects.create_user(
            "bob", password="testpass123", role=User.Role.PARENT, telegram_chat_id="12345",
        )

    def test_nothing_is_delivered_before_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            notify([self.alice], "Hello", "World", NotificationType.ATTENDANCE_ALERT)
        self.assertEqual(len(callbacks), 1)
        self.assertFalse(Notification.objects.exists())

    def test_delivered_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            notify([self.alice, self.bob.pk, None], "Hello", "World", NotificationType.ATTENDANCE_ALERT, {"k": 1})

        self.assertEqual(Notification.objects.count(), 2)
        note = Notification.objects.get(recipient=self.alice)
        self.assertEqual(note.metadata, {"k": 1})
        self.assertFalse(note.is_read)

    def test_rolled_back_work_sends_nothing(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            try:
                with transaction.atomic():
                    notify([self.alice], "Hello", "World", NotificationType.ATTENDANCE_ALERT)
                    raise RuntimeError("boom")
            except RuntimeError:
                pass
        self.assertEqual(callbacks, [])
        self.assertFalse(Notification.objects.exists())

    def test_empty_recipients(self):
        self.assertIsNone(notify([], "Hello", "World", NotificationType.ATTENDANCE_ALERT))

    @override_settings(NOTIFICATIONS_ASYNC=True)
    def test_async_mode_hands_off_to_scheduler(self):
        with mock.patch("notifications.dispatch.submit") as submit:
            with self.captureOnCommitCallbacks(execute=True):
                intent = notify([self.alice], "Hello", "World", NotificationType.ATTENDANCE_ALERT)
        submit.assert_called_once_with(deliver, intent)
        self.assertFalse(Notification.objects.exists())

    def test_in_app_preference_off_suppresses_rows(self):
        NotificationPreference.objects.create(user=self.alice, preferences={"in_app": False})
        intent = NotificationIntent((self.alice.pk,), "Hello", "World", NotificationType.ATTENDANCE_ALERT)

        deliver(intent)

        self.assertFalse(Notification.objects.exists())

    def test_telegram_channel_when_enabled(self):
        NotificationPreference.objects.create(user=self.bob, preferences={"telegram": True})
        intent = NotificationIntent((self.bob.pk,), "Hello", "World", NotificationType.ATTENDANCE_ALERT)

        with mock.patch("notifications.channels.requests.post") as post:
            post.return_value.status_code = 200
            deliver(intent)

        post.assert_called_once()
        self.assertEqual(post.call_args.kwargs["json"], {"chat_id": "12345", "text": "Hello\n\nWorld"})
        self.assertEqual(Notification.objects.filter(recipient=self.bob).count(), 1)

    def test_delivery_failure_is_logged_not_raised(self):
        intent = NotificationIntent((self.alice.pk, self.bob.pk), "Hello", "World", NotificationType.ATTENDANCE_ALERT)

        with mock.patch.object(Notification.objects, "create", side_effect=RuntimeError("db down")), \
                self.assertLogs("notifications.dispatch", level="ERROR") as logs:
            delivered = deliver(intent)

        self.assertEqual(delivered, 0)
        self.assertEqual(len(logs.records), 2)

    def test_telegram_network_error_is_swallowed(self):
        with mock.patch("notifications.channels.requests.post", side_effect=requests.ConnectionError()), \
                self.assertLogs("notifications.channels", level="ERROR"):
            self.assertFalse(send_telegram_message("12345", "hi"))

    @override_settings(TELEGRAM_BOT_TOKEN="")
    def test_telegram_without_token(self):
        with mock.patch("notifications.channels.requests.post") as post:
            self.assertFalse(send_telegram_message("12345", "hi"))
        post.assert_not_called()


@override_settings(NOTIFICATIONS_ASYNC=False)
class AttendanceNotificationTests(SchoolDataMixin, TestCase):

    def test_admins_are_told_about_new_edit_requests(self):
        record = self.make_schedule_record()

        with self.captureOnCommitCallbacks(execute=True):
            services.create_edit_request(
                self.teacher_user,
                attendance_id=record.pk,
                attendance_type=AttendanceType.SCHEDULE_BASED,
                proposed_changes={"status": "ABSENT"},
                reason="Wrong student",
            )

        notes = Notification.objects.filter(type=NotificationType.EDIT_REQUEST_CREATED)
        self.assertEqual([n.recipient for n in notes], [self.admin])
        self.assertEqual(notes[0].metadata["attendance_id"], record.pk)

    def test_requester_is_told_about_the_review(self):
        record = self.make_schedule_record()
        request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=record.pk,
            attendance_type=AttendanceType.SCHEDULE_BASED,
            proposed_changes={"status": "ABSENT"},
            reason="Wrong student",
        )["request_id"]

        with self.captureOnCommitCallbacks(execute=True):
            services.review_edit_request(request_id, self.admin, status="REJECTED", admin_comment="No proof")

        note = Notification.objects.get(type=NotificationType.EDIT_REQUEST_REVIEWED)
        self.assertEqual(note.recipient, self.teacher_user)
        self.assertIn("rejected", note.title)
        self.assertIn("No proof", note.message)

    def test_failed_review_sends_nothing(self):
        record = self.make_schedule_record()
        request_id = services.create_edit_request(
            self.teacher_user,
            attendance_id=record.pk,
            attendance_type=AttendanceType.SCHEDULE_BASED,
            proposed_changes={"status": "ABSENT"},
            reason="Wrong student",
        )["request_id"]

        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(BadRequest):
                services.review_edit_request(request_id, self.admin, status="REJECTED")

        self.assertFalse(Notification.objects.filter(type=NotificationType.EDIT_REQUEST_REVIEWED).exists())

    def test_parent_is_alerted_when_child_is_absent(self):
        with self.captureOnCommitCallbacks(execute=True):
            services.mark_attendance(
                self.teacher_user,
                date=self.today,
                records=[
                    {"student_id": self.students[0].pk, "status": "ABSENT"},
                    {"student_id": self.students[1].pk, "status": "ABSENT"},
                ],
                class_id=self.class_program.pk,
            )

        note = Notification.objects.get(type=NotificationType.ATTENDANCE_ALERT)
        self.assertEqual(note.recipient, self.parent)
        self.assertIn(self.students[0].full_name, note.title)

    def test_no_alert_for_present(self):
        with self.captureOnCommitCallbacks(execute=True):
            services.mark_attendance(
                self.teacher_user,
                date=self.today,
                records=[{"student_id": self.students[0].pk, "status": "PRESENT"}],
                class_id=self.class_program.pk,
            )
        self.assertFalse(Notification.objects.exists())


class NotificationApiTests(APITestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user("carol", password="testpass123", role=User.Role.TEACHER)
        cls.other = User.objects.create_user("dave", password="testpass123", role=User.Role.TEACHER)
        for i in range(3):
            Notification.objects.create(
                recipient=cls.user, title=f"Note {i}", message="...", type=NotificationType.ATTENDANCE_ALERT,
                is_read=(i == 0),
            )
        cls.foreign = Notification.objects.create(
            recipient=cls.other, title="Not yours", message="...", type=NotificationType.ATTENDANCE_ALERT,
        )

    def setUp(self):
        self.client.force_authenticate(self.user)

    def test_lists_only_own_notifications(self):
        response = self.client.get(reverse("notifications:list"))
        self.assertEqual(response.data["meta"]["total"], 3)

        unread = self.client.get(reverse("notifications:list"), {"unread": "true"})
        self.assertEqual(unread.data["meta"]["total"], 2)

    def test_mark_read(self):
        note = Notification.objects.filter(recipient=self.user, is_read=False).first()

        response = self.client.post(reverse("notifications:mark_read", args=[note.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        note.refresh_from_db()
        self.assertTrue(note.is_read)
        self.assertIsNotNone(note.read_at)

    def test_cannot_mark_someone_elses_notification(self):
        response = self.client.post(reverse("notifications:mark_read", args=[self.foreign.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_preferences_round_trip(self):
        response = self.client.get(reverse("notifications:preferences"))
        self.assertEqual(response.data["data"], {"in_app": True, "telegram": False})

        response = self.client.put(reverse("notifications:preferences"), {"telegram": True}, format="json")
        self.assertEqual(response.data["data"], {"in_app": True, "telegram": True})
        self.assertTrue(NotificationPreference.objects.get(user=self.user).preferences["telegram"])
