"""Serializers for the chalet catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Chalet


class ChaletSerializer(serializers.ModelSerializer):
    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = Chalet
        fields = ["id", "owner_id", "title_en", "title_ar", "price_per_night", "is_active"]
        read_only_fields = fields
