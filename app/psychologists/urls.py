# psychologists/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    PsychologistProfileViewSet,
    PsychologistAvailabilityViewSet,
    PsychologistMarketplaceViewSet,
)

# Create router for ViewSets
router = DefaultRouter()
router.register('profile', PsychologistProfileViewSet, basename='psychologist-profile')
router.register('availability', PsychologistAvailabilityViewSet, basename='psychologist-availability')
router.register('marketplace', PsychologistMarketplaceViewSet, basename='psychologist-marketplace')

urlpatterns = [
    path('', include(router.urls)),
]

# The resulting URL patterns will be:
#
# Psychologist Profile Management (for psychologists):
# - GET    /api/psychologists/profile/                              -> current psychologist's profile
# - PATCH  /api/psychologists/profile/update-profile/               -> update professional profile
# - PATCH  /api/psychologists/profile/payout-info/                  -> update payout bank account
#
# Psychologist Availability Management:
# - GET    /api/psychologists/availability/                         -> weekly template (7 entries)
# - PUT    /api/psychologists/availability/weekly/                  -> replace entries of the supplied days
#
# Psychologist Marketplace:
# - GET    /api/psychologists/marketplace/                          -> list complete profiles
# - GET    /api/psychologists/marketplace/{id}/                     -> profile, reviews and booked slots
# - GET    /api/psychologists/marketplace/{id}/available-slots/     -> free slots for ?date=YYYY-MM-DD
