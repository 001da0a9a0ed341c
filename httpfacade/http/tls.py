"""
Transport Adapters

Retry policy and the trust-all adapter mounted on facade sessions.

WARNING: TrustAllAdapter accepts every certificate chain (no chain,
expiry or issuer checks) and every hostname. It exists to reproduce the
historical client against internal endpoints and is only mounted when
ClientConfig.insecure_skip_verify is set.
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from httpfacade.config.runtime import ClientConfig


def build_retry(config: ClientConfig) -> Retry:
    """
    One transparent retry on connection failure, nothing else.

    Read errors and status codes are never retried, so a POST that reached
    the server is not sent twice.
    """
    if not config.retry_on_connection_failure:
        return Retry(0, read=False)
    return Retry(
        total=1,
        connect=1,
        read=False,
        status=0,
        redirect=0,
        backoff_factor=0,
        raise_on_status=False,
    )


class TrustAllAdapter(HTTPAdapter):
    """HTTPAdapter that disables certificate and hostname verification on every send."""

    def send(
        self,
        request: requests.PreparedRequest,
        stream: bool = False,
        timeout=None,
        verify=True,
        cert=None,
        proxies=None,
    ) -> requests.Response:
        # verify may arrive as a CA bundle path from REQUESTS_CA_BUNDLE; ignore it.
        return super().send(
            request,
            stream=stream,
            timeout=timeout,
            verify=False,
            cert=cert,
            proxies=proxies,
        )


def build_adapter(config: ClientConfig) -> HTTPAdapter:
    retry = build_retry(config)
    if config.insecure_skip_verify:
        return TrustAllAdapter(max_retries=retry)
    return HTTPAdapter(max_retries=retry)
