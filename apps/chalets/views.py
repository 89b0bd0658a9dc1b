"""API views for the chalet catalog."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore

from .models import Chalet
from .serializers import ChaletSerializer


class ChaletViewSet(viewsets.ReadOnlyModelViewSet):
    """Публичный список шале с ценой за ночь."""

    serializer_class = ChaletSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):  # type: ignore
        qs = Chalet.objects.select_related("owner")
        user = self.request.user
        if user.is_authenticated and (getattr(user, "is_staff", False) or getattr(user, "is_superuser", False)):
            return qs
        return qs.filter(is_active=True)
