# mixins.py
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .permissions import HasAllowedRole


class RoleRequiredMixin:
    """
    Restrict an API view to users with specific roles.
    Example usage in view:
        allowed_roles = ["ADMIN", "TEACHER"]
    """
    allowed_roles = []
    permission_classes = [IsAuthenticated, HasAllowedRole]


class EnvelopeMixin:
    """Wrap successful payloads as ``{"message": ..., "data": ...}``."""

    def envelope(self, message, data=None, status=200):
        body = {"message": message}
        if data is not None:
            body["data"] = data
        return Response(body, status=status)
