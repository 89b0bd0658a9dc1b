"""DRF exception handler translating domain errors into HTTP responses."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "invalid_range": status.HTTP_400_BAD_REQUEST,
    "invalid_request": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "storage_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_exception_handler(exc, context):  # type: ignore
    if isinstance(exc, DomainError):
        http_status = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
        if http_status >= 500:
            logger.error(f"{exc.code}: {exc}", exc_info=exc)
        return Response(exc.to_dict(), status=http_status)
    return drf_exception_handler(exc, context)
