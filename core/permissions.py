from rest_framework.permissions import BasePermission


def user_is_student(user):
    """Check if user is a student"""
    return user.is_authenticated and user.is_student()


def user_is_parent(user):
    """Check if user is a parent"""
    return user.is_authenticated and user.is_parent()


class HasAllowedRole(BasePermission):
    """
    Restrict access to users whose role is listed on the view.
    Example usage in view:
        allowed_roles = ["ADMIN", "TEACHER"]
    Superusers always pass; an empty list allows every authenticated user.
    """
    message = "Access denied. You don't have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        allowed_roles = getattr(view, "allowed_roles", None) or []
        if not allowed_roles:
            return True

        return user.is_superuser or user.role in allowed_roles
