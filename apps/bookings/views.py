"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from django.utils import timezone  # type: ignore

from . import services
from .domain.filters import BookingFilters
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    AvailabilityQuerySerializer,
    BookedDatesQuerySerializer,
    BookingCreateSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    ConfirmBookingSerializer,
    DepositRecordSerializer,
    EarningsLineSerializer,
    EarningsQuerySerializer,
    SearchQuerySerializer,
)

PUBLIC_ACTIONS = {"create", "availability", "booked_dates", "search"}


def _is_staff(user) -> bool:  # type: ignore
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


class IsChaletStakeholder(permissions.BasePermission):
    """Администраторы и владелец шале управляют бронированиями."""

    def has_permission(self, request, view):  # type: ignore
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if _is_staff(user):
            return True
        return obj.chalet.owner_id == user.id


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для создания и управления бронированиями шале."""

    queryset = Booking.objects.select_related("chalet", "chalet__owner").all()
    permission_classes = [IsChaletStakeholder]

    def get_permissions(self):  # type: ignore
        if self.action in PUBLIC_ACTIONS:
            return [permissions.AllowAny()]
        if self.action == "deposits":
            return [permissions.IsAdminUser()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "confirm":
            return ConfirmBookingSerializer
        if self.action == "cancel":
            return CancelBookingSerializer
        if self.action == "deposits":
            return DepositRecordSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if _is_staff(user):
            return qs
        return qs.filter(chalet__owner=user)

    def _query(self, serializer_class):  # type: ignore
        serializer = serializer_class(data=self.request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def list(self, request, *args, **kwargs):  # type: ignore
        filterset = BookingFilterSet(request.query_params, queryset=self.get_queryset())
        if not filterset.is_valid():
            raise serializers.ValidationError(filterset.errors)
        owner_id = None if _is_staff(request.user) else request.user.id
        bookings = services.list_bookings(filterset.criteria(owner_id=owner_id))
        return Response(BookingSerializer(bookings, many=True).data)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.confirm_booking(
            booking.id,
            serializer.validated_data["deposit_amount"],
            serializer.validated_data["reference_number"],
            confirmed_by=request.user,
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.cancel_booking(
            booking.id,
            cancelled_by=request.user,
            reason=serializer.validated_data.get("reason", ""),
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="suggested-deposit")
    def suggested_deposit(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        amount = services.suggested_deposit(booking)
        return Response({"booking_id": booking.id, "suggested_deposit": str(amount)})

    @action(detail=False, methods=["get"])
    def availability(self, request):  # type: ignore
        params = self._query(AvailabilityQuerySerializer)
        available = services.check_availability(params["chalet_id"], params["check_in"], params["check_out"])
        return Response({
            "chalet_id": params["chalet_id"],
            "check_in": params["check_in"],
            "check_out": params["check_out"],
            "available": available,
        })

    @action(detail=False, methods=["get"], url_path="booked-dates")
    def booked_dates(self, request):  # type: ignore
        params = self._query(BookedDatesQuerySerializer)
        days = services.booked_dates(params["chalet_id"], params.get("start"), params.get("end"))
        return Response({
            "chalet_id": params["chalet_id"],
            "booked_dates": [day.isoformat() for day in sorted(days)],
        })

    @action(detail=False, methods=["get"])
    def search(self, request):  # type: ignore
        params = self._query(SearchQuerySerializer)
        bookings = services.search_bookings(params["query"])
        return Response(BookingSerializer(bookings, many=True).data)

    @action(detail=False, methods=["get"])
    def deposits(self, request):  # type: ignore
        records = services.deposit_log()
        return Response(self.get_serializer(records, many=True).data)

    @action(detail=False, methods=["get"])
    def earnings(self, request):  # type: ignore
        params = self._query(EarningsQuerySerializer)
        filters = BookingFilters(
            check_in_from=params.get("from_date"),
            check_in_to=params.get("to_date"),
            chalet_id=params.get("chalet_id"),
            owner_id=None if _is_staff(request.user) else request.user.id,
        )
        today = timezone.localdate()
        lines = services.earnings_details(filters, status=params.get("status") or None, today=today)
        context = {**self.get_serializer_context(), "today": today}
        return Response(EarningsLineSerializer(lines, many=True, context=context).data)

    @action(detail=False, methods=["get"], url_path="earnings/summary", url_name="earnings-summary")
    def earnings_summary(self, request):  # type: ignore
        owner_id = None if _is_staff(request.user) else request.user.id
        summary = services.earnings_summary(owner_id)
        return Response({key: str(value) for key, value in summary.to_dict().items()})
