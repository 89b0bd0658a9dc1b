"""Admin registration for chalets."""

from __future__ import annotations

from django.contrib import admin

from .models import Chalet


@admin.register(Chalet)
class ChaletAdmin(admin.ModelAdmin):
    list_display = ("id", "title_en", "title_ar", "owner", "price_per_night", "is_active")
    list_filter = ("is_active",)
    search_fields = ("title_en", "title_ar", "owner__username", "owner__email")
    readonly_fields = ("created_at", "updated_at")
