# classes_app/models.py
from django.db import models

from core.models import TimeStampedModel


class ClassProgram(TimeStampedModel):
    name = models.CharField(max_length=100, help_text="E.g. JSS 1")
    arm = models.CharField(max_length=20, blank=True, help_text="E.g. A, Gold")
    session = models.ForeignKey(
        "academics.AcademicSession",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="classes",
    )
    teachers = models.ManyToManyField(
        "teachers.Teacher",
        through="ClassTeacherAssignment",
        related_name="assigned_classes",
        blank=True
    )

    class Meta:
        unique_together = ("name", "arm", "session")
        ordering = ["name", "arm"]

    def __str__(self):
        return f"{self.name} {self.arm}".strip()


class Subject(TimeStampedModel):
    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=20, blank=True, null=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class ClassTeacherAssignment(TimeStampedModel):
    """Homeroom (class-teacher) assignment; only these teachers mark daily attendance."""
    class_program = models.ForeignKey("ClassProgram", on_delete=models.CASCADE, related_name="teacher_assignments")
    teacher = models.ForeignKey("teachers.Teacher", on_delete=models.CASCADE, related_name="class_assignments")
    is_active = models.BooleanField(default=True)

    class Meta:
        unique_together = ("class_program", "teacher")
        ordering = ["class_program", "teacher"]

    def __str__(self):
        return f"{self.teacher} - {self.class_program}"


class ClassStudentQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class ClassStudent(TimeStampedModel):
    class_program = models.ForeignKey("ClassProgram", on_delete=models.CASCADE, related_name="enrollments")
    student = models.ForeignKey("students.Student", on_delete=models.CASCADE, related_name="enrollments")
    is_active = models.BooleanField(default=True)
    enrolled_at = models.DateField(auto_now_add=True)

    objects = ClassStudentQuerySet.as_manager()

    class Meta:
        unique_together = ("class_program", "student")
        ordering = ["class_program", "student"]

    def __str__(self):
        return f"{self.student} in {self.class_program}"


class Schedule(TimeStampedModel):
    """
    A period in a class timetable.
    E.g. "JSS 1 A, Mathematics, Monday 08:00 - 08:45"
    """
    class DayOfWeek(models.TextChoices):
        MONDAY = "MONDAY", "Monday"
        TUESDAY = "TUESDAY", "Tuesday"
        WEDNESDAY = "WEDNESDAY", "Wednesday"
        THURSDAY = "THURSDAY", "Thursday"
        FRIDAY = "FRIDAY", "Friday"
        SATURDAY = "SATURDAY", "Saturday"
        SUNDAY = "SUNDAY", "Sunday"

    class_program = models.ForeignKey("ClassProgram", on_delete=models.CASCADE, related_name="schedules")
    subject = models.ForeignKey("Subject", on_delete=models.SET_NULL, null=True, blank=True, related_name="schedules")
    teacher = models.ForeignKey(
        "teachers.Teacher",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="schedules",
    )
    day_of_week = models.CharField(max_length=10, choices=DayOfWeek.choices)
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta:
        ordering = ["class_program", "day_of_week", "start_time"]

    def __str__(self):
        return f"{self.class_program} - {self.subject or 'Free period'} ({self.get_day_of_week_display()} {self.start_time:%H:%M})"
