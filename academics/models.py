# academics/models.py
from django.db import models

from core.models import TimeStampedModel


class AcademicSession(TimeStampedModel):
    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "Active"
        INACTIVE = "INACTIVE", "Inactive"

    name = models.CharField(max_length=50, unique=True, help_text="E.g. 2025/2026")
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.INACTIVE)

    class Meta:
        ordering = ["-start_date"]

    def __str__(self):
        return self.name


class Term(TimeStampedModel):
    class Name(models.TextChoices):
        FIRST = "FIRST", "First term"
        SECOND = "SECOND", "Second term"
        THIRD = "THIRD", "Third term"

    session = models.ForeignKey(AcademicSession, on_delete=models.CASCADE, related_name="terms")
    name = models.CharField(max_length=10, choices=Name.choices)
    start_date = models.DateField()
    end_date = models.DateField()

    class Meta:
        unique_together = ("session", "name")
        ordering = ["session", "start_date"]

    def __str__(self):
        return f"{self.session.name} - {self.get_name_display()}"
