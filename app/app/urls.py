# app/urls.py
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),

    # API schema and documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # Apps
    path('api/', include('users.urls')),
    path('api/psychologists/', include('psychologists.urls')),
    path('api/appointments/', include('appointments.urls')),
    path('api/finance/', include('finance.urls')),
    # Payment endpoints live at the API root (/api/create-payment, /api/mp-webhook)
    path('api/', include('payments.urls')),
]
