"""
HTTP Client Facade

Wraps a single requests.Session with fixed timeouts, one retry on
connection failure and an optional trust-all TLS policy, and offers
GET/POST helpers on top of it.

Two calling styles are supported:
- get/post/post_json/post_form/post_body return the response, or None
  after logging the failure. Callers must treat None as failure.
- send/get_result/post_result return an HttpResult carrying either the
  response or the classified cause.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Optional, Union

import requests

from httpfacade.config.runtime import ClientConfig, get_default_config
from httpfacade.schemas.errors import InvalidRequestError

from .request import Headers, Params, RequestBody, RequestSpec
from .response import HttpResponse, HttpResult, classify_failure
from .tls import build_adapter

if TYPE_CHECKING:
    from httpfacade.receipts import HTTPReceipt, ReceiptRecorder

logger = logging.getLogger(__name__)

# Positional third argument of post(): a pre-built body, a JSON string or form fields.
Payload = Union[RequestBody, str, Params]


class HttpClientFacade:
    """
    GET/POST convenience methods over one shared session.

    Usage:
        facade = HttpClientFacade(ClientConfig())

        response = facade.get("https://api.example.com/data", params={"page": 1})
        if response is not None and response.ok:
            data = response.json()

        result = facade.post_result(
            "https://api.example.com/items",
            {"X-Trace": "abc"},
            json_body='{"name": "widget"}',
        )
        response = result.unwrap()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        recorder: Optional["ReceiptRecorder"] = None,
    ) -> None:
        """
        Initialize the facade. No connection is made until the first request.

        Args:
            config: Timeouts, retry and TLS policy (defaults to ClientConfig())
            recorder: Receipt recorder for audit logging
        """
        self.config = config or ClientConfig()
        self.recorder = recorder
        self._session: Optional[requests.Session] = None
        self._session_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        return self._get_session()

    def _get_session(self) -> requests.Session:
        """Lazy-load the session; built at most once per facade."""
        session = self._session
        if session is None:
            with self._session_lock:
                session = self._session
                if session is None:
                    session = self._build_session()
                    self._session = session
        return session

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        adapter = build_adapter(self.config)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        if self.config.insecure_skip_verify:
            session.verify = False
            logger.warning(
                "TLS certificate and hostname verification are DISABLED for this client "
                "(insecure_skip_verify=True); any certificate and any hostname will be accepted"
            )
        if self.config.user_agent:
            session.headers["User-Agent"] = self.config.user_agent
        if self.config.proxy:
            session.proxies = {
                "http": self.config.proxy,
                "https": self.config.proxy,
            }
        logger.debug(
            "Built HTTP session: timeout=%s retry_on_connection_failure=%s",
            self.config.timeout,
            self.config.retry_on_connection_failure,
        )
        return session

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _prepare(self, session: requests.Session, spec: RequestSpec) -> requests.PreparedRequest:
        """Build the wire request. Malformed input is raised, never swallowed."""
        try:
            prepared = session.prepare_request(spec.to_request())
            # Fails fast for schemes no adapter is mounted for (e.g. ftp://)
            session.get_adapter(prepared.url)
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidHeader,
        ) as e:
            raise InvalidRequestError(str(e), details={"url": spec.url}) from e
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(
                f"Cannot build {spec.method} request: {e}",
                details={"url": spec.url},
            ) from e
        return prepared

    def send(self, spec: RequestSpec) -> HttpResult:
        """
        Execute a request synchronously.

        Returns:
            HttpResult with the response, or the failure kind and cause

        Raises:
            InvalidRequestError: if the request cannot be built
        """
        session = self._get_session()
        prepared = self._prepare(session, spec)
        receipt = self._start_receipt(prepared, spec)

        logger.debug("%s %s", prepared.method, prepared.url)
        settings = session.merge_environment_settings(prepared.url, {}, None, None, None)
        try:
            raw = session.send(
                prepared,
                timeout=self.config.timeout,
                allow_redirects=True,
                **settings,
            )
        except requests.RequestException as e:
            failure, error = classify_failure(e, prepared.url or spec.url)
            if receipt is not None and self.recorder is not None:
                self.recorder.complete(receipt, error=str(e))
            return HttpResult.failed(failure, error)

        response = HttpResponse.from_requests(raw)
        if receipt is not None and self.recorder is not None:
            self.recorder.complete(
                receipt,
                response={
                    "status_code": raw.status_code,
                    "content_length": len(response.content),
                    "content_type": raw.headers.get("content-type"),
                },
                status_code=raw.status_code,
                response_headers=dict(raw.headers),
            )
            response.receipt_id = receipt.receipt_id
        return HttpResult.success(response)

    def send_or_raise(self, spec: RequestSpec) -> HttpResponse:
        """Execute a request and raise the typed HttpError on failure."""
        return self.send(spec).unwrap()

    def _start_receipt(
        self,
        prepared: requests.PreparedRequest,
        spec: RequestSpec,
    ) -> Optional["HTTPReceipt"]:
        if self.recorder is None:
            return None
        body = prepared.body
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        return self.recorder.start_http_receipt(
            method=prepared.method or spec.method,
            url=prepared.url or spec.url,
            headers=dict(prepared.headers),
            params=[list(pair) for pair in spec.params],
            body=body,
        )

    @staticmethod
    def _absent_on_failure(spec: RequestSpec, result: HttpResult) -> Optional[HttpResponse]:
        if result.is_success:
            return result.response
        logger.error(
            "%s %s failed (%s)",
            spec.method,
            spec.url,
            result.failure.value if result.failure else "unknown",
            exc_info=result.error,
        )
        return None

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Headers] = None,
        params: Optional[Params] = None,
        body: Optional[RequestBody] = None,
    ) -> Optional[HttpResponse]:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute request URL
            headers: Extra headers
            params: Query parameters appended to the URL
            body: Pre-built request body

        Returns:
            HttpResponse, or None if the request failed (the failure is logged)
        """
        spec = RequestSpec.build(method, url, headers=headers, params=params, body=body)
        return self._absent_on_failure(spec, self.send(spec))

    # ------------------------------------------------------------------
    # GET
    # ------------------------------------------------------------------

    def get_result(
        self,
        url: str,
        headers: Optional[Headers] = None,
        params: Optional[Params] = None,
    ) -> HttpResult:
        """GET with optional headers and query parameters, as an HttpResult."""
        return self.send(RequestSpec.build("GET", url, headers=headers, params=params))

    def get(
        self,
        url: str,
        headers: Optional[Headers] = None,
        params: Optional[Params] = None,
    ) -> Optional[HttpResponse]:
        """
        Make a GET request.

        Params are appended in iteration order after any query already
        present in the URL; pass (key, value) pairs to repeat a key.
        """
        spec = RequestSpec.build("GET", url, headers=headers, params=params)
        return self._absent_on_failure(spec, self.send(spec))

    # ------------------------------------------------------------------
    # POST
    # ------------------------------------------------------------------

    @staticmethod
    def _post_body(
        headers: Optional[Union[Headers, str]],
        payload: Optional[Payload],
        json_body: Optional[str],
        form: Optional[Params],
        body: Optional[RequestBody],
    ) -> tuple[Optional[Headers], RequestBody]:
        """Resolve post() arguments to (headers, body)."""
        # post(url, json_body) keeps working positionally
        if isinstance(headers, str):
            if payload is not None:
                raise InvalidRequestError("headers must be a mapping when a payload is also given")
            headers, payload = None, headers

        if payload is not None:
            if isinstance(payload, RequestBody):
                if body is not None:
                    raise InvalidRequestError("Pass the request body once")
                body = payload
            elif isinstance(payload, str):
                if json_body is not None:
                    raise InvalidRequestError("Pass the JSON body once")
                json_body = payload
            else:
                if form is not None:
                    raise InvalidRequestError("Pass the form fields once")
                form = payload

        given = [v for v in (json_body, form, body) if v is not None]
        if len(given) > 1:
            raise InvalidRequestError("Pass at most one of json_body, form or body")

        if body is not None:
            return headers, body
        if form is not None:
            return headers, RequestBody.form(form)
        if json_body is not None:
            return headers, RequestBody.json(json_body)
        return headers, RequestBody.empty()

    def post_result(
        self,
        url: str,
        headers: Optional[Union[Headers, str]] = None,
        payload: Optional[Payload] = None,
        *,
        json_body: Optional[str] = None,
        form: Optional[Params] = None,
        body: Optional[RequestBody] = None,
    ) -> HttpResult:
        """POST, returning an HttpResult. Arguments as for post()."""
        headers, request_body = self._post_body(headers, payload, json_body, form, body)
        return self.send(RequestSpec.build("POST", url, headers=headers, body=request_body))

    def post(
        self,
        url: str,
        headers: Optional[Union[Headers, str]] = None,
        payload: Optional[Payload] = None,
        *,
        json_body: Optional[str] = None,
        form: Optional[Params] = None,
        body: Optional[RequestBody] = None,
    ) -> Optional[HttpResponse]:
        """
        Make a POST request.

        The body is chosen from exactly one of:
            json_body: raw JSON text, sent as application/json; charset=utf-8
            form: fields sent as application/x-www-form-urlencoded, in order
            body: a pre-built RequestBody, sent as-is
        With none of them an empty JSON body is sent. The positional
        payload is dispatched on its type (RequestBody, str or mapping),
        and post(url, json_text) treats the second argument as the body.
        Absent headers are treated as empty headers.

        Returns:
            HttpResponse, or None if the request failed (the failure is logged)
        """
        headers, request_body = self._post_body(headers, payload, json_body, form, body)
        spec = RequestSpec.build("POST", url, headers=headers, body=request_body)
        return self._absent_on_failure(spec, self.send(spec))

    def post_json(
        self,
        url: str,
        json_body: str,
        headers: Optional[Headers] = None,
    ) -> Optional[HttpResponse]:
        """POST raw JSON text."""
        return self.post(url, headers, json_body=json_body)

    def post_form(
        self,
        url: str,
        form: Params,
        headers: Optional[Headers] = None,
    ) -> Optional[HttpResponse]:
        """POST form-urlencoded fields."""
        return self.post(url, headers, form=form)

    def post_body(
        self,
        url: str,
        body: RequestBody,
        headers: Optional[Headers] = None,
    ) -> Optional[HttpResponse]:
        """POST a pre-built body."""
        return self.post(url, headers, body=body)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the HTTP session. The next request builds a new one."""
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def __enter__(self) -> "HttpClientFacade":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# Process-wide instance
_instance: Optional[HttpClientFacade] = None
_instance_lock = threading.Lock()


def get_instance() -> HttpClientFacade:
    """
    Get the process-wide facade, building it from the default config on first use.

    Prefer constructing HttpClientFacade explicitly and passing it to
    the code that needs it.
    """
    global _instance
    instance = _instance
    if instance is None:
        with _instance_lock:
            instance = _instance
            if instance is None:
                instance = HttpClientFacade(get_default_config().client)
                _instance = instance
    return instance


def reset_instance() -> None:
    """Close and forget the process-wide facade."""
    global _instance
    with _instance_lock:
        instance, _instance = _instance, None
    if instance is not None:
        instance.close()
