# attendance/tests/base.py
from datetime import date, time

from django.contrib.auth import get_user_model
from django.utils import timezone

from academics.models import AcademicSession, Term
from attendance.models import ScheduleBasedAttendance, StudentDailyAttendance
from classes_app.models import ClassProgram, ClassStudent, ClassTeacherAssignment, Schedule, Subject
from students.models import Student
from teachers.models import Teacher

User = get_user_model()


class SchoolDataMixin:
    """One active session, one class with three enrolled students, a class
    teacher who also teaches the class's Mathematics period, and a second
    teacher with no assignments."""

    @classmethod
    def setUpTestData(cls):
        cls.session = AcademicSession.objects.create(
            name="2025/2026",
            start_date=date(2025, 9, 1),
            end_date=date(2026, 7, 31),
            status=AcademicSession.Status.ACTIVE,
        )
        cls.term = Term.objects.create(
            session=cls.session,
            name=Term.Name.FIRST,
            start_date=date(2025, 9, 1),
            end_date=date(2025, 12, 19),
        )

        cls.admin = User.objects.create_user("admin", password="testpass123", role=User.Role.ADMIN)
        cls.teacher_user = User.objects.create_user("teacher", password="testpass123", role=User.Role.TEACHER)
        cls.teacher = Teacher.objects.create(user=cls.teacher_user, first_name="Abebe", last_name="Kebede")
        cls.other_teacher_user = User.objects.create_user("teacher2", password="testpass123", role=User.Role.TEACHER)
        cls.other_teacher = Teacher.objects.create(user=cls.other_teacher_user, first_name="Sara", last_name="Haile")
        cls.parent = User.objects.create_user("parent", password="testpass123", role=User.Role.PARENT)

        cls.class_program = ClassProgram.objects.create(name="JSS 1", arm="A", session=cls.session)
        ClassTeacherAssignment.objects.create(class_program=cls.class_program, teacher=cls.teacher)
        cls.subject = Subject.objects.create(name="Mathematics", code="MTH")
        cls.schedule = Schedule.objects.create(
            class_program=cls.class_program,
            subject=cls.subject,
            teacher=cls.teacher,
            day_of_week=Schedule.DayOfWeek.MONDAY,
            start_time=time(8, 0),
            end_time=time(8, 45),
        )

        names = [("Hana", "Tadesse"), ("Yonas", "Alemu"), ("Liya", "Bekele")]
        cls.students = []
        for i, (first, last) in enumerate(names, start=1):
            student = Student.objects.create(
                first_name=first,
                last_name=last,
                registration_number=f"REG-{i:03d}",
                parent=cls.parent if i == 1 else None,
            )
            ClassStudent.objects.create(class_program=cls.class_program, student=student)
            cls.students.append(student)
        cls.outsider = Student.objects.create(first_name="Outside", last_name="Student", registration_number="REG-999")

    def setUp(self):
        super().setUp()
        self.today = timezone.localdate()

    # helpers ---------------------------------------------------------------

    def make_schedule_record(self, student=None, *, day=None, status="PRESENT", locked=True, marked_by=None):
        return ScheduleBasedAttendance.objects.create(
            student=student or self.students[0],
            schedule=self.schedule,
            session=self.session,
            date=day or self.today,
            status=status,
            marked_by=marked_by or self.teacher_user,
            is_locked=locked,
        )

    def make_daily_record(self, student=None, *, day=None, status="PRESENT", locked=True, marked_by=None):
        return StudentDailyAttendance.objects.create(
            student=student or self.students[0],
            class_program=self.class_program,
            session=self.session,
            date=day or self.today,
            status=status,
            marked_by=marked_by or self.teacher_user,
            is_locked=locked,
        )
