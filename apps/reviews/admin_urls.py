from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AdminReviewViewSet

router = DefaultRouter()
router.register(r'reviews', AdminReviewViewSet, basename='admin-review')

urlpatterns = [path('', include(router.urls))]
