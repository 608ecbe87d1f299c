from django.contrib import admin
from django.utils.html import format_html
from .models import Teacher


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'employee_id', 'user', 'is_active_badge')
    list_filter = ('is_active',)
    search_fields = ('first_name', 'last_name', 'employee_id', 'user__username')
    ordering = ('last_name', 'first_name')

    def is_active_badge(self, obj):
        color = 'green' if obj.is_active else 'red'
        status = 'Active' if obj.is_active else 'Inactive'
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            status
        )
    is_active_badge.short_description = 'Active Status'
    is_active_badge.admin_order_field = 'is_active'
