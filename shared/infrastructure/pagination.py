"""Page/limit pagination used by the list endpoints."""

from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore


class PageLimitPagination(PageNumberPagination):
    """``?page=&limit=`` pagination with a ``{results, pagination}`` body."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100
    results_key = "results"

    def pagination_meta(self) -> dict[str, int]:
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return {
            "page": self.page.number,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit) if limit else 0,
        }

    def get_paginated_response(self, data, **extra):  # type: ignore
        body = {self.results_key: data, "pagination": self.pagination_meta()}
        body.update(extra)
        return Response(body)
