"""API views for managing reviews."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.audit.services import apply_tracked_changes, record_audit
from apps.users.permissions import IsAdmin, IsAgent
from shared.infrastructure.pagination import PageLimitPagination

from .filters import AdminReviewFilterSet, ReviewFilterSet
from .models import Review
from .serializers import (
    AdminReviewUpdateSerializer,
    AgentResponseSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
)
from .services import HELPFUL_ADDED, respond_to_review, submit_review, toggle_helpful

logger = logging.getLogger(__name__)


class ReviewPagination(PageLimitPagination):
    results_key = "reviews"


class ReviewViewSet(mixins.CreateModelMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Public reviews.

    - GET /api/v1/reviews/ - approved reviews (tour, rating, sort)
    - POST /api/v1/reviews/ - review a completed booking
    - POST /api/v1/reviews/{id}/helpful/ - toggle the caller's helpful vote
    - POST /api/v1/reviews/{id}/respond/ - tour operator response
    """

    queryset = Review.objects.select_related('tour', 'tour__agent', 'user', 'booking').filter(is_approved=True)
    pagination_class = ReviewPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ReviewFilterSet

    def get_permissions(self):  # type: ignore
        if self.action in {'list', 'retrieve'}:
            return [permissions.AllowAny()]
        if self.action == 'respond':
            return [IsAgent]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):  # type: ignore
        if self.action == 'create':
            return ReviewCreateSerializer
        return ReviewSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = submit_review(request.user, serializer.validated_data)
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def helpful(self, request, pk=None):  # type: ignore
        action_taken, review = toggle_helpful(pk, request.user)
        return Response(
            {
                "success": True,
                "action": action_taken,
                "data": {"id": review.pk, "helpful_count": review.helpful_count},
                "message": "Marked review as helpful" if action_taken == HELPFUL_ADDED else "Removed helpful mark",
            }
        )

    @action(detail=True, methods=['post'])
    def respond(self, request, pk=None):  # type: ignore
        review = self.get_object()
        serializer = AgentResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = respond_to_review(request.user, review, serializer.validated_data['response'])
        return Response(ReviewSerializer(review).data)


class AdminReviewViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Review moderation. Each change writes an audit row."""

    queryset = Review.objects.select_related('tour', 'user', 'booking').all()
    serializer_class = ReviewSerializer
    permission_classes = [IsAdmin]
    pagination_class = ReviewPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminReviewFilterSet

    def partial_update(self, request, pk=None):  # type: ignore
        review = self.get_object()
        serializer = AdminReviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            changes = apply_tracked_changes(review, serializer.validated_data)
            review.save()
            record_audit(
                request.user,
                "review_moderated",
                "review",
                review.pk,
                {"tour_id": review.tour_id, "changes": changes},
                request=request,
            )
        return Response({"review": self.get_serializer(review).data})

    def destroy(self, request, pk=None):  # type: ignore
        review = self.get_object()
        with transaction.atomic():
            record_audit(
                request.user,
                "review_deleted",
                "review",
                review.pk,
                {"tour_id": review.tour_id, "rating": review.rating},
                request=request,
            )
            review.delete()
        logger.info(f"Review {pk} deleted by admin {request.user.pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)
