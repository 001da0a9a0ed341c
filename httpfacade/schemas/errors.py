"""
Error Taxonomy

Purpose: Standard error taxonomy for the HTTP facade.
Stable error codes plus the exceptions raised for control flow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from httpfacade.http.response import HttpResponse


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the facade."""

    # Transport Errors
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    TLS_FAILURE = "TLS_FAILURE"
    NETWORK_ERROR = "NETWORK_ERROR"

    # Request & Response Errors
    INVALID_REQUEST = "INVALID_REQUEST"
    HTTP_STATUS_ERROR = "HTTP_STATUS_ERROR"

    # Setup Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HttpFacadeException(Exception):
    """
    Base exception for all facade errors.

    Carries a stable code, structured details and a retryable flag.
    """

    def __init__(
        self,
        message: str,
        code: str = "HTTP_FACADE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class HttpError(HttpFacadeException):
    """Request execution failed before a response was received."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.NETWORK_ERROR,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = True,
    ) -> None:
        full_details = details or {}
        if url:
            full_details["url"] = url
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=retryable,
        )
        self.url = url


class RequestTimeoutError(HttpError):
    """Connect, read or write exceeded the configured timeout."""

    def __init__(self, message: str, url: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code=ErrorCodes.REQUEST_TIMEOUT, url=url, details=details)


class ConnectionFailedError(HttpError):
    """DNS failure, refused connection or reset before a response."""

    def __init__(self, message: str, url: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code=ErrorCodes.CONNECTION_FAILED, url=url, details=details)


class TLSError(HttpError):
    """TLS negotiation or certificate verification failed."""

    def __init__(self, message: str, url: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            code=ErrorCodes.TLS_FAILURE,
            url=url,
            details=details,
            retryable=False,
        )


class HttpStatusError(HttpFacadeException):
    """Raised by HttpResponse.raise_for_status for non-2xx responses."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional["HttpResponse"] = None,
    ) -> None:
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if response is not None and response.url:
            details["url"] = response.url
        super().__init__(
            message=message,
            code=ErrorCodes.HTTP_STATUS_ERROR,
            details=details,
            retryable=status_code is not None and status_code >= 500,
        )
        self.status_code = status_code
        self.response = response


class InvalidRequestError(HttpFacadeException, ValueError):
    """The request could not be built (bad URL, header or body arguments)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_REQUEST,
            details=details,
            retryable=False,
        )


class ConfigurationException(HttpFacadeException):
    """Exception raised when client configuration is invalid."""

    def __init__(self, message: str, field_path: str | None = None, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )

