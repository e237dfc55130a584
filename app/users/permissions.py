# users/permissions.py
from rest_framework import permissions
from django.utils.translation import gettext_lazy as _


class IsPlatformAdmin(permissions.BasePermission):
    """
    Permission for platform administrators (Admin accounts or staff)
    """
    message = _("Only administrators can perform this action.")

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            (request.user.is_admin or request.user.is_staff)
        )


class IsPatient(permissions.BasePermission):
    """
    Permission for patient accounts
    """
    message = _("Only patients can perform this action.")

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_patient
