"""FilterSet definitions for earnings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Earning


class EarningFilterSet(django_filters.FilterSet):
    """Фильтры доходов: статус и период создания."""

    status = django_filters.ChoiceFilter(choices=Earning.Status.choices)
    created_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Earning
        fields = ["status"]
