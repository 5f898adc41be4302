"""Domain errors raised by services and CRUD helpers.

Each error carries the HTTP status it maps to; the handlers registered in
``shop_admin.main`` render them as ``{"detail": ...}``.
"""
from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[Any] = None):
        self.detail = detail if detail is not None else self.default_detail
        super().__init__(str(self.detail))


class ValidationError(AppError):
    """Missing or malformed input. Never retried."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"

    def __init__(self, detail: Optional[Any] = None, field: Optional[str] = None):
        self.field = field
        if field and isinstance(detail, str):
            detail = {"field": field, "message": detail}
        super().__init__(detail)


class UnsupportedInputKind(ValidationError):
    default_detail = "Unsupported image input. Provide raw bytes or a base64 image data URI."


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied. Admin privileges required."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class UploadError(AppError):
    """The asset store rejected an upload or the transport failed."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Error uploading image"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error uploading image: {reason}")
