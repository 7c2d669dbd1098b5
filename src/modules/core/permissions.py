"""Shared DRF permission classes.

Admins are Django ``is_staff`` users.
"""

from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and user.is_staff)


class IsAdminOrReadOnly(BasePermission):
    """Anyone may read; only admins may write."""

    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)


class IsOwnerOrAdmin(BasePermission):
    """Object-level check for resources carrying a ``user`` FK."""

    def has_object_permission(self, request, view, obj) -> bool:
        if is_admin(request.user):
            return True
        return getattr(obj, "user_id", None) == request.user.id
