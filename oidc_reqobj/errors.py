"""Error types raised while building and validating request objects."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .constants import INVALID_REQUEST, SERVER_ERROR


class RequestObjectErrorKind(str, Enum):
    """Why a request object was rejected."""

    CONFIGURATION = "configuration"
    CONSTRUCTION = "construction"
    APP_LOOKUP = "app_lookup"
    UNSIGNED_OBJECT = "unsigned_object"
    SIGNATURE_VERIFICATION = "signature_verification"
    CLAIMS = "claims"
    GENERAL = "general"


class ErrorResponse(BaseModel):
    """OAuth 2.0 error response body."""

    error: str
    error_description: str


class RequestObjectError(Exception):
    """Base error for request object processing.

    ``code`` is the OAuth 2.0 error code surfaced to the client, ``kind``
    classifies the failure for internal use (audit tagging, metrics).
    """

    def __init__(
        self,
        code: str,
        message: str,
        kind: RequestObjectErrorKind = RequestObjectErrorKind.GENERAL,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.kind = kind
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Render the error as an OAuth 2.0 error response."""
        return ErrorResponse(error=self.code, error_description=self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, kind={self.kind.value!r}, message={self.message!r})"


class RequestObjectConfigurationError(RequestObjectError):
    """No builder is registered for the selected carrier type."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            SERVER_ERROR, message, RequestObjectErrorKind.CONFIGURATION, details
        )


class RequestObjectConstructionError(RequestObjectError):
    """The carrier payload is malformed or could not be fetched."""

    def __init__(
        self,
        message: str,
        code: str = INVALID_REQUEST,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(code, message, RequestObjectErrorKind.CONSTRUCTION, details)


class AppLookupError(Exception):
    """Client application configuration could not be retrieved."""

    def __init__(self, client_id: str | None, message: str | None = None) -> None:
        self.client_id = client_id
        super().__init__(message or f"No client application registered for client_id: {client_id}")
