# notifications/serializers.py
from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ["id", "title", "message", "type", "metadata", "is_read", "read_at", "created_at"]


class NotificationFilterSerializer(serializers.Serializer):
    unread = serializers.BooleanField(required=False, default=False)


class PreferencesSerializer(serializers.Serializer):
    in_app = serializers.BooleanField(required=False)
    telegram = serializers.BooleanField(required=False)
