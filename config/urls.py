"""URL configuration for the Method Passion booking admin.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the versioned JSON API of each app and the OpenAPI schema.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Sessions
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/team/', include(('apps.users.team_urls', 'team'), namespace='team')),
    path('api/v1/team/', include('apps.bookings.team_urls')),
    # Application URLs
    path('api/v1/team-users/', include('apps.users.urls')),
    path('api/v1/', include('apps.accommodations.urls')),
    path('api/v1/', include('apps.bookings.urls')),
    # Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
