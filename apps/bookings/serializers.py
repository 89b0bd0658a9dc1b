"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from . import services
from .domain.earnings import EarningsStatus, earnings_status
from .models import Booking, DepositRecord


class BookingCreateSerializer(serializers.Serializer):
    """Создание брони гостем.

    Проверка дат и пересечений выполняется в сервисном слое, поэтому
    ошибки приходят с кодами ``invalid_range`` и ``conflict``.
    """

    chalet_id = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guest_phone = serializers.CharField(max_length=32)

    def create(self, validated_data):  # type: ignore
        return services.create_booking(
            validated_data["chalet_id"],
            validated_data["check_in"],
            validated_data["check_out"],
            validated_data["guest_phone"],
        )


class BookingSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    chalet_id = serializers.ReadOnlyField(source="chalet.id")
    chalet_title = serializers.ReadOnlyField(source="chalet.title_en")
    nights = serializers.ReadOnlyField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "reference",
            "chalet_id",
            "chalet_title",
            "guest_phone",
            "check_in",
            "check_out",
            "nights",
            "status",
            "total_price",
            "deposit_amount",
            "payment_reference",
            "commission_amount",
            "created_at",
            "updated_at",
            "confirmed_at",
            "cancelled_at",
            "cancellation_reason",
        ]
        read_only_fields = fields


class ConfirmBookingSerializer(serializers.Serializer):
    """Подтверждение брони после получения депозита."""

    deposit_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    reference_number = serializers.CharField(max_length=100)


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class AvailabilityQuerySerializer(serializers.Serializer):
    chalet_id = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()


class BookedDatesQuerySerializer(serializers.Serializer):
    """Календарь занятых дат; окно ``start``/``end`` необязательно."""

    chalet_id = serializers.IntegerField(min_value=1)
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        if ("start" in attrs) != ("end" in attrs):
            raise serializers.ValidationError("Укажите обе даты окна: start и end.")
        return attrs


class SearchQuerySerializer(serializers.Serializer):
    query = serializers.CharField(max_length=100)


class DepositRecordSerializer(serializers.ModelSerializer):
    """Запись журнала депозитов."""

    booking_id = serializers.ReadOnlyField(source="booking.id")
    booking_reference = serializers.ReadOnlyField(source="booking.reference")
    chalet_id = serializers.ReadOnlyField(source="booking.chalet_id")
    recorded_by_id = serializers.ReadOnlyField(source="recorded_by.id")

    class Meta:
        model = DepositRecord
        fields = [
            "id",
            "booking_id",
            "booking_reference",
            "chalet_id",
            "amount",
            "reference_number",
            "recorded_by_id",
            "created_at",
        ]
        read_only_fields = fields


class EarningsQuerySerializer(serializers.Serializer):
    """Фильтры отчёта о доходах владельца."""

    from_date = serializers.DateField(required=False)
    to_date = serializers.DateField(required=False)
    chalet_id = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=EarningsStatus.choices(), required=False, allow_blank=True)


class EarningsLineSerializer(serializers.ModelSerializer):
    """Строка отчёта о доходах по одному бронированию."""

    booking_id = serializers.ReadOnlyField(source="id")
    date = serializers.DateField(source="check_in", read_only=True)
    chalet_name = serializers.SerializerMethodField()
    nights = serializers.ReadOnlyField()
    commission = serializers.DecimalField(source="commission_value", max_digits=14, decimal_places=2, read_only=True)
    net_earnings = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "booking_id",
            "reference",
            "date",
            "chalet_name",
            "nights",
            "total_price",
            "commission",
            "net_earnings",
            "status",
        ]
        read_only_fields = fields

    def get_chalet_name(self, obj: Booking) -> str:
        request = self.context.get("request")
        language = getattr(request, "LANGUAGE_CODE", "en") if request is not None else "en"
        return obj.chalet.title_for(language)

    def get_status(self, obj: Booking) -> str | None:
        bucket = earnings_status(obj.status, obj.check_out, self.context["today"])
        return bucket.value if bucket is not None else None
