from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'role', 'is_active', 'date_joined')
    list_filter = ('role', 'is_active', 'date_joined')
    search_fields = ('username', 'email', 'first_name', 'last_name', 'phone')

    fieldsets = BaseUserAdmin.fieldsets + (
        ('School Backend Info', {
            'fields': ('role', 'phone', 'telegram_chat_id')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('School Backend Info', {
            'fields': ('role', 'phone')
        }),
    )
