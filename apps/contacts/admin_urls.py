from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AdminContactViewSet

router = DefaultRouter()
router.register(r'contacts', AdminContactViewSet, basename='admin-contact')

urlpatterns = [path('', include(router.urls))]
