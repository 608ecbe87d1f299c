from django.contrib import admin
from .models import ClassProgram, ClassStudent, ClassTeacherAssignment, Schedule, Subject

admin.site.register(Subject)


class ClassTeacherInline(admin.TabularInline):
    model = ClassTeacherAssignment
    extra = 0


class ClassStudentInline(admin.TabularInline):
    model = ClassStudent
    extra = 0
    raw_id_fields = ("student",)


@admin.register(ClassProgram)
class ClassProgramAdmin(admin.ModelAdmin):
    list_display = ("name", "arm", "session")
    list_filter = ("session",)
    search_fields = ("name", "arm")
    inlines = [ClassTeacherInline, ClassStudentInline]


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ("class_program", "subject", "teacher", "day_of_week", "start_time", "end_time")
    list_filter = ("day_of_week", "class_program")
    search_fields = ("class_program__name", "subject__name", "teacher__first_name", "teacher__last_name")
