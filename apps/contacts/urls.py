"""Public contact form route mounted at ``/api/v1/contact/``."""

from django.urls import path  # type: ignore

from .views import ContactView

urlpatterns = [
    path('', ContactView.as_view(), name='contact'),
]
