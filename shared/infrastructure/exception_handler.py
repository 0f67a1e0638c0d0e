"""Перевод доменных исключений в ответы DRF."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    InvalidStateTransition,
    NotAuthorized,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateTransition, status.HTTP_400_BAD_REQUEST),
    (NotAuthorized, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
)


def domain_error_payload(exc: DomainError) -> dict:
    payload = {"detail": exc.message, "code": exc.__class__.__name__}
    if isinstance(exc, ValidationError) and exc.field:
        payload["field"] = exc.field
    if isinstance(exc, ConflictError):
        payload["dates"] = [day.isoformat() for day in exc.dates]
    if isinstance(exc, InvalidStateTransition):
        payload["current_status"] = exc.current
        payload["allowed_from"] = list(exc.allowed)
    return payload


def exception_handler(exc, context):
    """Сначала доменные ошибки, остальное отдаём стандартному обработчику DRF."""

    if isinstance(exc, DomainError):
        for error_type, http_status in STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                break
        else:
            http_status = status.HTTP_400_BAD_REQUEST
        view = context.get("view")
        logger.info(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc.message}"
        )
        return Response(domain_error_payload(exc), status=http_status)
    return drf_exception_handler(exc, context)
