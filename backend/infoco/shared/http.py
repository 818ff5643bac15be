"""Translation of core errors into HTTP responses, applied at the call site."""
from __future__ import annotations

from fastapi import HTTPException, status

from infoco.core.errors import NotFoundError, ValidationError


def validation_failed(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": exc.message, "fields": exc.fields},
    )


def not_found(exc: NotFoundError, label: str = "Record") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
