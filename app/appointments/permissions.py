# appointments/permissions.py
from rest_framework import permissions
from django.utils.translation import gettext_lazy as _


class IsSessionParticipant(permissions.BasePermission):
    """
    Permission to allow session participants (patient or psychologist) to access a session
    """
    message = _("You can only access sessions you are a participant in.")

    def has_permission(self, request, view):
        """
        Check if user is authenticated and has a role that can participate in sessions
        """
        if not request.user.is_authenticated:
            return False

        # Admins can access all sessions
        if request.user.is_admin or request.user.is_staff:
            return True

        return request.user.user_type in ['Patient', 'Psychologist']

    def has_object_permission(self, request, view, obj):
        """
        Check if user is participant in this specific session
        """
        if request.user.is_admin or request.user.is_staff:
            return True

        return obj.is_participant(request.user)
