# psychologists/permissions.py
from rest_framework import permissions
from django.utils.translation import gettext_lazy as _


class IsPsychologistOwner(permissions.BasePermission):
    """
    Permission to only allow psychologists to access their own profile
    """
    message = _("You can only access your own psychologist profile.")

    def has_permission(self, request, view):
        """
        Check if user is authenticated and is a psychologist
        """
        return (
            request.user.is_authenticated and
            request.user.user_type == 'Psychologist'
        )

    def has_object_permission(self, request, view, obj):
        """
        Check if the psychologist profile belongs to the requesting user
        """
        # obj should be a Psychologist instance
        return obj.user == request.user
