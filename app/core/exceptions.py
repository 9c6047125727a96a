"""
Domain exceptions raised by the service layer.

Endpoints let these propagate; the handlers registered in ``app.main`` turn
them into ``{"message": ...}`` responses with the matching status code.
"""
from typing import Optional


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class ExternalServiceError(ServiceError):
    """A call to the conversational-AI provider failed.

    ``status_code`` mirrors the upstream status when there was one, and is
    502 when the request never got a response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, upstream_text: Optional[str] = None):
        if upstream_text:
            message = f"{message}: {upstream_text}"
        super().__init__(message)
        self.status_code = status_code or 502
        self.upstream_text = upstream_text
