"""
Receipt Recorder

Records every request executed by a facade. A single facade is shared
across threads, so all bookkeeping happens under a lock.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from .models import HTTPReceipt, fingerprint


def generate_receipt_id(request_data: dict[str, Any]) -> str:
    """
    Generate a receipt ID from request data.

    Format: rc_http_{hash_prefix}_{nonce}

    The nonce keeps identical concurrent requests from colliding while the
    hash prefix still groups receipts for the same request.
    """
    hash_hex = fingerprint(request_data)[2:14]
    return f"rc_http_{hash_hex}_{uuid.uuid4().hex[:8]}"


class ReceiptRecorder:
    """
    Records receipts for outgoing HTTP requests.

    Usage:
        recorder = ReceiptRecorder()
        facade = HttpClientFacade(config, recorder=recorder)

        facade.get("https://api.example.com/data")

        for receipt in recorder.get_receipts():
            print(receipt.method, receipt.url, receipt.status_code)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._receipts: list[HTTPReceipt] = []
        self._in_progress: dict[str, HTTPReceipt] = {}

    def start_http_receipt(
        self,
        *,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        params: Optional[list[Any]] = None,
        body: Optional[str] = None,
    ) -> HTTPReceipt:
        """Start recording an HTTP request."""
        request = {
            "method": method,
            "url": url,
            "headers": headers or {},
            "params": params or [],
            "body": body,
        }

        receipt = HTTPReceipt(
            receipt_id=generate_receipt_id(request),
            method=method,
            url=url,
            request=request,
            started_at=datetime.now(timezone.utc),
        )

        with self._lock:
            self._in_progress[receipt.receipt_id] = receipt
        return receipt

    def complete(
        self,
        receipt: HTTPReceipt,
        *,
        response: Optional[dict[str, Any]] = None,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        response_headers: Optional[dict[str, str]] = None,
    ) -> HTTPReceipt:
        """
        Complete a receipt with response data or error.

        Args:
            receipt: The receipt to complete
            response: Response summary (dict)
            error: Error message if failed
            status_code: HTTP status of the response
            response_headers: Headers of the response

        Returns:
            The completed receipt
        """
        now = datetime.now(timezone.utc)
        receipt.ended_at = now
        if receipt.started_at:
            receipt.duration_ms = (now - receipt.started_at).total_seconds() * 1000

        if response is not None:
            receipt.response = response
        if error is not None:
            receipt.error = error
        if status_code is not None:
            receipt.status_code = status_code
        if response_headers is not None:
            receipt.response_headers = response_headers

        receipt.compute_hashes()

        with self._lock:
            self._in_progress.pop(receipt.receipt_id, None)
            self._receipts.append(receipt)
        return receipt

    def get_receipts(self) -> list[HTTPReceipt]:
        """Get all completed receipts."""
        with self._lock:
            return list(self._receipts)

    def get_in_progress(self) -> list[HTTPReceipt]:
        """Get receipts that haven't been completed yet."""
        with self._lock:
            return list(self._in_progress.values())

    def clear(self) -> None:
        """Clear all receipts."""
        with self._lock:
            self._receipts.clear()
            self._in_progress.clear()
