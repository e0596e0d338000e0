"""URL configuration for the SafariPlus project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the versioned REST API assembled from each app's routers and the OpenAPI
schema with its Swagger UI.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

agent_patterns = [
    path('', include('apps.tours.agent_urls')),
    path('', include('apps.bookings.agent_urls')),
    path('', include('apps.finances.agent_urls')),
]

admin_patterns = [
    # agents/top/ must resolve before the agent detail routes
    path('', include('apps.analytics.admin_urls')),
    path('', include('apps.users.admin_urls')),
    path('', include('apps.tours.admin_urls')),
    path('', include('apps.bookings.admin_urls')),
    path('', include('apps.reviews.admin_urls')),
    path('', include('apps.finances.admin_urls')),
    path('', include('apps.contacts.admin_urls')),
]

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/tours/', include('apps.tours.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/reviews/', include('apps.reviews.urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),
    path('api/v1/contact/', include('apps.contacts.urls')),
    path('api/v1/stats/', include('apps.analytics.urls')),
    path('api/v1/messages/', include('apps.chat.urls')),
    # Tour operator dashboard
    path('api/v1/agent/', include(agent_patterns)),
    # Platform administration
    path('api/v1/admin/', include(admin_patterns)),
    # API schema and docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
