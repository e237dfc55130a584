# finance/permissions.py
from rest_framework import permissions
from django.utils.translation import gettext_lazy as _


class IsPsychologist(permissions.BasePermission):
    """
    Permission for psychologist accounts
    """
    message = _("Only psychologists can perform this action.")

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_psychologist


class IsPsychologistOrAdmin(permissions.BasePermission):
    message = _("Only psychologists and administrators can access payouts.")

    def has_permission(self, request, view):
        user = request.user
        return user.is_authenticated and (user.is_psychologist or user.is_admin or user.is_staff)
