from core.exceptions import NotFound
from .models import Teacher


def get_teacher_for_user(user):
    """Map an authenticated user to their teacher profile."""
    teacher = Teacher.objects.filter(user_id=user.pk).first()
    if teacher is None:
        raise NotFound("Teacher not found")
    return teacher
