"""API views for host earnings.

Earnings are written by booking events, so the API is read-only. Hosts
see their own entries; staff see every entry.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from .filters import EarningFilterSet
from .models import Earning
from .serializers import EarningSerializer, EarningsSummarySerializer
from .services import earnings_summary


class EarningViewSet(viewsets.ReadOnlyModelViewSet):
    """Доходы хозяина по оплаченным бронированиям."""

    queryset = Earning.objects.select_related("booking", "booking__room").all()
    serializer_class = EarningSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = EarningFilterSet
    ordering_fields = ["created_at", "available_date", "host_payout"]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(host=user)

    @extend_schema(responses=EarningsSummarySerializer)
    @action(detail=False, methods=["get"])
    def summary(self, request):  # type: ignore
        """Суммы выплат хозяину по статусам."""
        return Response(EarningsSummarySerializer(earnings_summary(request.user.pk)).data)
