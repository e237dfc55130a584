from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import AuthViewSet, UserViewSet

# Create router for ViewSets
router = DefaultRouter()
router.register('auth', AuthViewSet, basename='auth')
router.register('users', UserViewSet, basename='users')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# POST   /api/auth/register/
# POST   /api/auth/login/
# POST   /api/auth/logout/
# GET    /api/auth/me/
# PATCH  /api/auth/update-profile/
# GET    /api/users/              (admin)
# GET    /api/users/{id}/         (admin)
