"""
Schemas Module

Error codes and exception taxonomy for the HTTP facade.
"""

from .errors import (
    ConfigurationException,
    ConnectionFailedError,
    ErrorCodes,
    HttpError,
    HttpFacadeException,
    HttpStatusError,
    InvalidRequestError,
    RequestTimeoutError,
    TLSError,
)

__all__ = [
    "ConfigurationException",
    "ConnectionFailedError",
    "ErrorCodes",
    "HttpError",
    "HttpFacadeException",
    "HttpStatusError",
    "InvalidRequestError",
    "RequestTimeoutError",
    "TLSError",
]
