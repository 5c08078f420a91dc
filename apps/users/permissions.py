"""Role-based permission classes shared by the API modules."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsHost(permissions.BasePermission):
    """
    Only property hosts (and managers) may call the endpoint.

    Ownership of the concrete property is verified by the service layer.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if hasattr(user, "is_manager") and user.is_manager():
            return True
        return hasattr(user, "is_host") and user.is_host()


class IsManager(permissions.BasePermission):
    """Platform staff only."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return hasattr(user, "is_manager") and user.is_manager()
