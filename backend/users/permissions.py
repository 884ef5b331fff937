# backend/users/permissions.py
from rest_framework.permissions import BasePermission

from .models import ROLE_ADMIN, ROLE_STUDENT


def role_name(user):
    return getattr(user, "get_active_role_name", lambda: None)() if user and user.is_authenticated else None


class IsAuthenticatedAndHasRole(BasePermission):
    required_roles = ()  # override per subclass
    staff_bypass = True

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        # Staff bypass = treat as admin
        if self.staff_bypass and request.user.is_staff:
            return True
        rn = role_name(request.user)
        return rn in self.required_roles if self.required_roles else True


class IsAdminRole(IsAuthenticatedAndHasRole):
    required_roles = (ROLE_ADMIN,)


class IsStudentRole(IsAuthenticatedAndHasRole):
    """
    Student-only endpoints. Requires the Student role *and* a student profile,
    so results are always scoped to ``request.user.student``.
    """
    required_roles = (ROLE_STUDENT,)
    staff_bypass = False
    message = "A student account is required."

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return hasattr(request.user, "student")


def is_admin_user(user):
    if not user or not user.is_authenticated:
        return False
    return user.is_staff or role_name(user) == ROLE_ADMIN
