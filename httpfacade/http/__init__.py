"""
HTTP Client Module

GET/POST facade over a shared requests session, with typed results
and optional receipt recording.
"""

from .client import HttpClientFacade, get_instance, reset_instance
from .request import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE, RequestBody, RequestSpec
from .response import FailureKind, HttpResponse, HttpResult
from .tls import TrustAllAdapter

__all__ = [
    "HttpClientFacade",
    "get_instance",
    "reset_instance",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "RequestBody",
    "RequestSpec",
    "FailureKind",
    "HttpResponse",
    "HttpResult",
    "TrustAllAdapter",
]
