"""URL routing for the chalet catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ChaletViewSet

router = DefaultRouter()
router.register(r"", ChaletViewSet, basename="chalet")

urlpatterns = [
    path("", include(router.urls)),
]
