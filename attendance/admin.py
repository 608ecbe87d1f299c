from django.contrib import admin
from .models import AttendanceEditRequest, ScheduleBasedAttendance, StudentDailyAttendance


@admin.register(ScheduleBasedAttendance)
class ScheduleBasedAttendanceAdmin(admin.ModelAdmin):
    list_display = ('student', 'schedule', 'date', 'status', 'is_locked', 'marked_by')
    list_filter = ('status', 'is_locked', 'date')
    search_fields = ('student__first_name', 'student__last_name', 'student__registration_number')
    date_hierarchy = 'date'
    raw_id_fields = ('student', 'schedule')


@admin.register(StudentDailyAttendance)
class StudentDailyAttendanceAdmin(admin.ModelAdmin):
    list_display = ('student', 'class_program', 'date', 'status', 'is_locked', 'marked_by')
    list_filter = ('class_program', 'status', 'is_locked', 'date')
    search_fields = ('student__first_name', 'student__last_name', 'student__registration_number')
    date_hierarchy = 'date'
    raw_id_fields = ('student',)


@admin.register(AttendanceEditRequest)
class AttendanceEditRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'attendance_type', 'attendance_id', 'requested_by', 'status', 'reviewed_by', 'created_at')
    list_filter = ('status', 'attendance_type')
    search_fields = ('requested_by__username', 'reason')
    readonly_fields = ('created_at', 'updated_at', 'reviewed_at')
