"""
Receipt Models

One HTTPReceipt per request executed through a recording facade: what
was sent, what came back, and how long it took.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def fingerprint(data: dict[str, Any]) -> str:
    """
    0x-prefixed SHA-256 of ``data`` serialized as JSON with sorted keys.

    Mapping key order does not change the result; list order (query
    params among them) does.
    """
    encoded = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return "0x" + hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class HTTPReceipt(BaseModel):
    """
    Receipt for an HTTP request.

    ``request`` and ``response`` hold the recorded summaries; the hashes
    are filled in when the recorder completes the receipt.
    """

    model_config = ConfigDict(extra="forbid")

    receipt_id: str = Field(
        ...,
        description="Unique identifier for this receipt",
    )
    method: str = Field(
        ...,
        description="HTTP method (GET, POST, etc.)",
    )
    url: str = Field(
        ...,
        description="Request URL as sent, query string included",
    )
    request: dict[str, Any] = Field(
        ...,
        description="Method, URL, headers, params and body as sent",
    )
    response: dict[str, Any] = Field(
        default_factory=dict,
        description="Status, length and content type of the response",
    )
    request_hash: Optional[str] = Field(
        default=None,
        description="Fingerprint of the request (0x-prefixed)",
    )
    response_hash: Optional[str] = Field(
        default=None,
        description="Fingerprint of the response (0x-prefixed)",
    )
    status_code: Optional[int] = Field(
        default=None,
        description="HTTP status code",
    )
    response_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Response headers",
    )
    error: Optional[str] = Field(
        default=None,
        description="Error message if the request failed",
    )
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: Optional[float] = None

    def compute_hashes(self) -> "HTTPReceipt":
        """Fingerprint the request, and the response once there is one."""
        if self.request_hash is None:
            self.request_hash = fingerprint(self.request)
        if self.response_hash is None and self.response:
            self.response_hash = fingerprint(self.response)
        return self

    @property
    def is_successful(self) -> bool:
        """True when a response arrived without a transport error."""
        return self.error is None and bool(self.response)
