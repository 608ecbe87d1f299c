# notifications/views.py
import logging

from rest_framework import generics
from rest_framework.views import APIView

from core.exceptions import NotFound
from core.mixins import EnvelopeMixin, RoleRequiredMixin
from .models import Notification, NotificationPreference
from .serializers import NotificationFilterSerializer, NotificationSerializer, PreferencesSerializer

logger = logging.getLogger(__name__)


class NotificationListView(RoleRequiredMixin, generics.GenericAPIView):
    serializer_class = NotificationSerializer

    def get(self, request):
        filters = NotificationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        qs = Notification.objects.for_user(request.user)
        if filters.validated_data["unread"]:
            qs = qs.unread()
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)


class NotificationMarkReadView(RoleRequiredMixin, EnvelopeMixin, APIView):
    def post(self, request, pk):
        notification = Notification.objects.for_user(request.user).filter(pk=pk).first()
        if notification is None:
            raise NotFound("Notification not found")
        notification.mark_read()
        return self.envelope("Notification marked as read", NotificationSerializer(notification).data)


class NotificationPreferenceView(RoleRequiredMixin, EnvelopeMixin, APIView):
    def get(self, request):
        return self.envelope("Preferences retrieved", NotificationPreference.for_user(request.user))

    def put(self, request):
        serializer = PreferencesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pref, _ = NotificationPreference.objects.get_or_create(user=request.user)
        pref.preferences = {**NotificationPreference.for_user(request.user), **serializer.validated_data}
        pref.save()
        logger.info("Notification preferences updated for user %s: %s", request.user.pk, pref.preferences)
        return self.envelope("Preferences updated", pref.preferences)
