"""
Request Building

Transient request descriptions. A RequestSpec is built per call, turned
into a requests.Request by the facade, and discarded once the call returns.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union
from urllib.parse import quote_plus, urlencode, urlsplit, urlunsplit

import requests
from requests.structures import CaseInsensitiveDict

from httpfacade.schemas.errors import InvalidRequestError

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Headers = Mapping[str, str]
# A mapping, or (key, value) pairs when a key has to repeat.
Params = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]


def _pairs(values: Optional[Params]) -> list[tuple[str, Any]]:
    """Flatten a mapping or pair sequence, keeping iteration order."""
    if values is None:
        return []
    if isinstance(values, Mapping):
        return list(values.items())
    if isinstance(values, (str, bytes)):
        raise InvalidRequestError(
            "Expected a mapping or a sequence of (key, value) pairs, got a string",
            details={"type": type(values).__name__},
        )
    try:
        return [(key, value) for key, value in values]
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(
            f"Expected a mapping or a sequence of (key, value) pairs: {e}",
            details={"type": type(values).__name__},
        ) from e


def encode_pairs(pairs: Sequence[tuple[str, Any]]) -> str:
    """
    Form-encode pairs in order. Shared by query strings and form bodies.

    A None value is sent as a bare key (``a``), a list or tuple value
    repeats its key once per element.
    """
    parts = []
    for key, value in pairs:
        if value is None:
            parts.append(quote_plus(str(key)))
        else:
            parts.append(urlencode([(key, value)], doseq=isinstance(value, (list, tuple))))
    return "&".join(part for part in parts if part)


def append_query(url: str, query: str) -> str:
    """Append an encoded query after any query already in the URL."""
    if not query:
        return url
    scheme, netloc, path, existing, fragment = urlsplit(url)
    combined = f"{existing}&{query}" if existing else query
    return urlunsplit((scheme, netloc, path, combined, fragment))


@dataclass(frozen=True)
class RequestBody:
    """
    A pre-built request body: raw bytes plus the media type to send with it.
    """
    content: bytes = b""
    content_type: Optional[str] = None

    @classmethod
    def json(cls, json_body: str) -> "RequestBody":
        """Raw JSON text, sent as-is with the fixed JSON content type."""
        return cls(json_body.encode("utf-8"), JSON_CONTENT_TYPE)

    @classmethod
    def form(cls, params: Optional[Params]) -> "RequestBody":
        """URL-encoded form data, one field per pair in iteration order."""
        return cls(encode_pairs(_pairs(params)).encode("ascii"), FORM_CONTENT_TYPE)

    @classmethod
    def create(cls, content: Union[str, bytes], content_type: Optional[str] = None) -> "RequestBody":
        if isinstance(content, str):
            content = content.encode("utf-8")
        return cls(content, content_type)

    @classmethod
    def empty(cls) -> "RequestBody":
        """Empty JSON body, used for header-only POSTs."""
        return cls.json("")

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class RequestSpec:
    """
    Description of one outgoing request.

    headers: header name -> value, names unique
    params: query parameters appended after any query already in the URL
    body: None for bodiless requests
    """
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: list[tuple[str, Any]] = field(default_factory=list)
    body: Optional[RequestBody] = None

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Optional[Headers] = None,
        params: Optional[Params] = None,
        body: Optional[RequestBody] = None,
    ) -> "RequestSpec":
        """
        Normalize optional arguments: absent headers/params become empty.

        Raises:
            InvalidRequestError: if headers or params have the wrong shape
        """
        try:
            header_map = dict(headers) if headers else {}
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(
                f"Headers must be a mapping of name to value: {e}",
                details={"type": type(headers).__name__},
            ) from e
        return cls(
            method=method.upper(),
            url=url,
            headers=header_map,
            params=_pairs(params),
            body=body,
        )

    def effective_headers(self) -> CaseInsensitiveDict:
        """
        Headers as they go on the wire.

        The body's media type replaces any Content-Type the caller passed.
        """
        headers = CaseInsensitiveDict(self.headers)
        if self.body is not None and self.body.content_type:
            headers["Content-Type"] = self.body.content_type
        return headers

    @property
    def target_url(self) -> str:
        """The URL with params appended, encoded the same way as form bodies."""
        return append_query(self.url, encode_pairs(self.params))

    def to_request(self) -> requests.Request:
        return requests.Request(
            method=self.method,
            url=self.target_url,
            headers=self.effective_headers(),
            data=self.body.content if self.body is not None else None,
        )

    def prepare(self) -> requests.PreparedRequest:
        """Prepare without a session (no session-level headers or proxies)."""
        return self.to_request().prepare()
