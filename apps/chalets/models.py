"""Chalet catalog models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Chalet(models.Model):
    """Шале, сдаваемое посуточно."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chalets",
    )
    title_en = models.CharField(max_length=255)
    title_ar = models.CharField(max_length=255, blank=True)
    price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Шале")
        verbose_name_plural = _("Шале")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="chalet_owner_active_idx"),
        ]

    def __str__(self) -> str:
        return self.title_en

    def title_for(self, language: str) -> str:
        if language.startswith("ar") and self.title_ar:
            return self.title_ar
        return self.title_en
