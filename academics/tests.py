from datetime import date

from django.test import TestCase

from core.exceptions import Conflict, NotFound
from .models import AcademicSession
from .services import get_active_session


class ActiveSessionTests(TestCase):

    def create_session(self, name, status=AcademicSession.Status.INACTIVE):
        return AcademicSession.objects.create(
            name=name, start_date=date(2025, 9, 1), end_date=date(2026, 7, 31), status=status,
        )

    def test_returns_the_single_active_session(self):
        self.create_session("2024/2025")
        active = self.create_session("2025/2026", AcademicSession.Status.ACTIVE)
        self.assertEqual(get_active_session(), active)

    def test_no_active_session(self):
        self.create_session("2024/2025")
        with self.assertRaises(NotFound):
            get_active_session()

    def test_more_than_one_active_session(self):
        self.create_session("2024/2025", AcademicSession.Status.ACTIVE)
        self.create_session("2025/2026", AcademicSession.Status.ACTIVE)
        with self.assertRaises(Conflict), self.assertLogs("academics.services", level="ERROR"):
            get_active_session()
