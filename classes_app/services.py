from .models import ClassStudent, ClassTeacherAssignment


def is_class_teacher(teacher, class_program_id):
    return ClassTeacherAssignment.objects.filter(
        teacher=teacher, class_program_id=class_program_id, is_active=True
    ).exists()


def is_enrolled(student_id, class_program_id):
    """Is the student actively enrolled in the class?"""
    return ClassStudent.objects.active().filter(
        student_id=student_id, class_program_id=class_program_id
    ).exists()


def active_enrollments(class_program_id):
    return (
        ClassStudent.objects.active()
        .filter(class_program_id=class_program_id)
        .select_related("student")
        .order_by("student__last_name", "student__first_name")
    )
