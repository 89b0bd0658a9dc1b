"""FilterSet definitions for booking listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .domain.filters import BookingFilters
from .domain.lifecycle import BookingStatus
from .models import Booking

ALL_STATUSES = "all"


class BookingFilterSet(django_filters.FilterSet):
    """Query parameters of the booking list; ``criteria()`` turns them into BookingFilters."""

    status = django_filters.ChoiceFilter(
        choices=[(ALL_STATUSES, ALL_STATUSES), *BookingStatus.choices()],
        method="filter_status",
    )
    check_in_from = django_filters.DateFilter(field_name="check_in", lookup_expr="gte")
    check_in_to = django_filters.DateFilter(field_name="check_in", lookup_expr="lte")
    chalet_id = django_filters.NumberFilter(field_name="chalet_id", lookup_expr="exact")
    reference = django_filters.CharFilter(field_name="reference", lookup_expr="icontains")
    phone = django_filters.CharFilter(field_name="guest_phone", lookup_expr="exact")

    class Meta:
        model = Booking
        fields = ["status", "check_in_from", "check_in_to", "chalet_id", "reference", "phone"]

    def filter_status(self, queryset, name, value):  # type: ignore
        if not value or value == ALL_STATUSES:
            return queryset
        return queryset.filter(status=value)

    def criteria(self, owner_id: int | None = None) -> BookingFilters:
        """Build registry criteria from the validated form; call after ``is_valid()``."""
        data = self.form.cleaned_data
        status = data.get("status")
        chalet_id = data.get("chalet_id")
        return BookingFilters(
            status=None if not status or status == ALL_STATUSES else status,
            check_in_from=data.get("check_in_from"),
            check_in_to=data.get("check_in_to"),
            chalet_id=int(chalet_id) if chalet_id is not None else None,
            reference=data.get("reference") or None,
            phone=data.get("phone") or None,
            owner_id=owner_id,
        )
