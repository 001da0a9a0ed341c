"""
Response Types

HttpResponse is what a successful round-trip returns. HttpResult wraps
either a response or the classified cause of a failed round-trip.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import requests

from httpfacade.schemas.errors import (
    ConnectionFailedError,
    HttpError,
    HttpStatusError,
    RequestTimeoutError,
    TLSError,
)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.

    The body is read fully before this object is built, so there is
    no stream for the caller to close.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0
    receipt_id: Optional[str] = None

    @classmethod
    def from_requests(cls, response: requests.Response) -> "HttpResponse":
        return cls(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse response as JSON."""
        return json.loads(self.content)

    def raise_for_status(self) -> None:
        """Raise HttpStatusError if status is not 2xx."""
        if not self.ok:
            raise HttpStatusError(
                f"HTTP {self.status_code}",
                status_code=self.status_code,
                response=self,
            )


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    TLS = "tls"
    NETWORK = "network"


def classify_failure(exc: requests.RequestException, url: str) -> tuple[FailureKind, HttpError]:
    """
    Map a requests exception onto the facade's failure taxonomy.

    SSLError subclasses ConnectionError and ConnectTimeout subclasses both
    ConnectionError and Timeout, so the checks run most-specific first.
    """
    details = {"cause": type(exc).__name__}
    if isinstance(exc, requests.exceptions.SSLError):
        kind, error = FailureKind.TLS, TLSError(str(exc), url=url, details=details)
    elif isinstance(exc, requests.exceptions.Timeout):
        kind, error = FailureKind.TIMEOUT, RequestTimeoutError(str(exc), url=url, details=details)
    elif isinstance(exc, requests.exceptions.ConnectionError):
        kind, error = FailureKind.CONNECTION, ConnectionFailedError(str(exc), url=url, details=details)
    else:
        kind, error = FailureKind.NETWORK, HttpError(str(exc), url=url, details=details)
    error.__cause__ = exc
    return kind, error


@dataclass
class HttpResult:
    """
    Outcome of one request: a response, or a failure kind with its cause.

    Usage:
        result = facade.get_result("https://api.example.com/data")
        if result.is_success:
            data = result.response.json()
        elif result.failure is FailureKind.TIMEOUT:
            ...
    """
    response: Optional[HttpResponse] = None
    failure: Optional[FailureKind] = None
    error: Optional[HttpError] = None

    @classmethod
    def success(cls, response: HttpResponse) -> "HttpResult":
        return cls(response=response)

    @classmethod
    def failed(cls, failure: FailureKind, error: HttpError) -> "HttpResult":
        return cls(failure=failure, error=error)

    @property
    def is_success(self) -> bool:
        return self.response is not None

    def unwrap(self) -> HttpResponse:
        """Return the response or raise the typed failure."""
        if self.response is not None:
            return self.response
        if self.error is not None:
            # the stored error never carries a traceback; each call raises a copy
            raise copy.copy(self.error).with_traceback(None) from self.error.__cause__
        raise HttpError("Request produced neither a response nor an error")
