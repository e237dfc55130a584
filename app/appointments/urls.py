# appointments/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import TherapySessionViewSet

# Create router for ViewSets
router = DefaultRouter()
router.register('sessions', TherapySessionViewSet, basename='session')

urlpatterns = [
    path('', include(router.urls)),
]

# The resulting URL patterns will be:
#
# - GET    /api/appointments/sessions/                         -> current user's sessions (all for admins)
# - GET    /api/appointments/sessions/{id}/                    -> session detail
# - GET    /api/appointments/sessions/upcoming/                -> sessions still ahead
# - GET    /api/appointments/sessions/history/                 -> past, completed or cancelled sessions
# - GET    /api/appointments/sessions/booking-status/          -> has the webhook created this booking yet
# - GET    /api/appointments/sessions/patients/                -> psychologist's patient list
# - GET    /api/appointments/sessions/patients/{patient_id}/   -> one patient's history with the psychologist
# - POST   /api/appointments/sessions/{id}/cancel/             -> cancel a paid or scheduled session
# - POST   /api/appointments/sessions/{id}/schedule/           -> psychologist confirms a paid session
# - POST   /api/appointments/sessions/{id}/leave-room/         -> record video room exit
# - PATCH  /api/appointments/sessions/{id}/notes/              -> psychologist's private note
# - POST   /api/appointments/sessions/{id}/review/             -> patient review
