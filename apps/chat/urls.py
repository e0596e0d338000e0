"""Messaging routes mounted under ``/api/v1/messages/``."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ConversationViewSet, RealtimeAuthView

router = DefaultRouter()
router.register(r'conversations', ConversationViewSet, basename='conversation')

urlpatterns = [
    path('realtime/auth/', RealtimeAuthView.as_view(), name='realtime-auth'),
    path('', include(router.urls)),
]
