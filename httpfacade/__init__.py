"""
httpfacade

Synchronous GET/POST helpers over one shared, lazily built HTTP client
with fixed timeouts and an opt-in trust-all TLS policy.
"""

from .config import ClientConfig, RuntimeConfig, get_default_config, set_default_config
from .http import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    FailureKind,
    HttpClientFacade,
    HttpResponse,
    HttpResult,
    RequestBody,
    RequestSpec,
    get_instance,
    reset_instance,
)
from .receipts import ReceiptRecorder
from .schemas.errors import (
    ConnectionFailedError,
    HttpError,
    HttpFacadeException,
    HttpStatusError,
    InvalidRequestError,
    RequestTimeoutError,
    TLSError,
)

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "FailureKind",
    "HttpClientFacade",
    "HttpResponse",
    "HttpResult",
    "RequestBody",
    "RequestSpec",
    "get_instance",
    "reset_instance",
    "ReceiptRecorder",
    "ConnectionFailedError",
    "HttpError",
    "HttpFacadeException",
    "HttpStatusError",
    "InvalidRequestError",
    "RequestTimeoutError",
    "TLSError",
]
