"""API views for the contact form."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.audit.services import apply_tracked_changes, get_client_ip, record_audit
from apps.users.permissions import IsAdmin
from shared.infrastructure.pagination import PageLimitPagination

from .models import ContactMessage
from .serializers import ContactMessageCreateSerializer, ContactMessageSerializer, ContactStatusSerializer
from .services import submit_contact_message


class ContactView(APIView):
    """POST /api/v1/contact/ - public, bot-protected."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def post(self, request, format=None):  # type: ignore
        serializer = ContactMessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        contact = submit_contact_message(serializer.validated_data, ip_address=get_client_ip(request))
        return Response(
            {"id": contact.pk, "message": "Thank you for contacting us. We will get back to you soon."},
            status=status.HTTP_201_CREATED,
        )


class ContactFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=ContactMessage.Status.choices)

    class Meta:
        model = ContactMessage
        fields = ["status"]


class ContactPagination(PageLimitPagination):
    results_key = "messages"


class AdminContactViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = ContactMessage.objects.all()
    serializer_class = ContactMessageSerializer
    permission_classes = [IsAdmin]
    pagination_class = ContactPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ContactFilterSet

    def partial_update(self, request, pk=None):  # type: ignore
        contact = self.get_object()
        serializer = ContactStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            changes = apply_tracked_changes(contact, serializer.validated_data)
            contact.save()
            record_audit(
                request.user,
                "contact_updated",
                "contact_message",
                contact.pk,
                {"subject": contact.subject, "changes": changes},
                request=request,
            )
        return Response({"message": self.get_serializer(contact).data})
