"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, DepositRecord


class DepositRecordInline(admin.TabularInline):
    model = DepositRecord
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "reference_number", "recorded_by", "created_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Статус меняется только через сервисы, в админке поля только для чтения."""

    list_display = (
        "reference",
        "chalet",
        "guest_phone",
        "status",
        "check_in",
        "check_out",
        "total_price",
        "deposit_amount",
        "created_at",
    )
    list_filter = ("status", "check_in", "check_out")
    search_fields = ("reference", "guest_phone", "chalet__title_en", "chalet__title_ar")
    readonly_fields = (
        "reference",
        "status",
        "deposit_amount",
        "payment_reference",
        "commission_amount",
        "created_at",
        "updated_at",
        "confirmed_at",
        "confirmed_by",
        "cancelled_at",
        "cancelled_by",
    )
    inlines = [DepositRecordInline]

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(DepositRecord)
class DepositRecordAdmin(admin.ModelAdmin):
    list_display = ("booking", "amount", "reference_number", "recorded_by", "created_at")
    search_fields = ("booking__reference", "reference_number")
    readonly_fields = ("booking", "amount", "reference_number", "recorded_by", "created_at")
