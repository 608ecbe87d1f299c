from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'registration_number', 'parent', 'created_at')
    search_fields = ('first_name', 'last_name', 'registration_number')
    date_hierarchy = 'created_at'
