"""
Receipt Recording Unit Tests
Tests for httpfacade/receipts.
"""
import hashlib
import threading

from httpfacade.receipts import HTTPReceipt, ReceiptRecorder, fingerprint


class TestFingerprint:
    """Tests for receipt fingerprints."""

    def test_known_value(self):
        expected = hashlib.sha256(b'{"a":1,"b":[2]}').hexdigest()

        assert fingerprint({"b": [2], "a": 1}) == "0x" + expected

    def test_mapping_key_order_does_not_matter(self):
        """Header insertion order must not change a request hash."""
        first = {"headers": {"X": "1", "Accept": "*/*"}, "url": "http://a"}
        second = {"url": "http://a", "headers": {"Accept": "*/*", "X": "1"}}

        assert fingerprint(first) == fingerprint(second)

    def test_param_order_matters(self):
        """Params are an ordered list, so reordering them is a different request."""
        assert fingerprint({"params": [["a", "1"], ["b", "2"]]}) != fingerprint(
            {"params": [["b", "2"], ["a", "1"]]}
        )

    def test_non_json_values_stringified(self):
        assert fingerprint({"body": b"raw"}) == fingerprint({"body": "b'raw'"})


class TestReceiptModel:
    """Tests for HTTPReceipt."""

    def test_compute_hashes(self):
        receipt = HTTPReceipt(
            receipt_id="rc_http_1",
            method="GET",
            url="http://example.com/",
            request={"method": "GET", "url": "http://example.com/"},
            response={"status_code": 200},
        )

        receipt.compute_hashes()

        assert receipt.request_hash == fingerprint(receipt.request)
        assert receipt.response_hash == fingerprint({"status_code": 200})
        assert receipt.is_successful

    def test_no_response_hash_without_response(self):
        receipt = HTTPReceipt(
            receipt_id="rc_http_2",
            method="POST",
            url="http://example.com/",
            request={"method": "POST"},
        )

        receipt.compute_hashes()

        assert receipt.request_hash.startswith("0x")
        assert receipt.response_hash is None
        assert not receipt.is_successful


class TestReceiptRecorder:
    """Tests for ReceiptRecorder."""

    def test_start_and_complete(self):
        recorder = ReceiptRecorder()

        receipt = recorder.start_http_receipt(
            method="GET",
            url="http://example.com/data?page=1",
            headers={"X": "1"},
        )

        assert receipt.receipt_id.startswith("rc_http_")
        assert receipt.started_at is not None
        assert recorder.get_in_progress() == [receipt]

        recorder.complete(
            receipt,
            response={"status_code": 200},
            status_code=200,
            response_headers={"Content-Type": "application/json"},
        )

        assert recorder.get_in_progress() == []
        assert recorder.get_receipts() == [receipt]
        assert receipt.status_code == 200
        assert receipt.duration_ms is not None
        assert receipt.response_hash is not None

    def test_complete_with_error(self):
        recorder = ReceiptRecorder()
        receipt = recorder.start_http_receipt(method="GET", url="http://127.0.0.1:1/")

        recorder.complete(receipt, error="connection refused")

        assert receipt.error == "connection refused"
        assert not receipt.is_successful
        assert receipt.response_hash is None

    def test_identical_requests_get_distinct_ids(self):
        recorder = ReceiptRecorder()

        first = recorder.start_http_receipt(method="GET", url="http://example.com/")
        second = recorder.start_http_receipt(method="GET", url="http://example.com/")

        assert first.receipt_id != second.receipt_id
        assert len(recorder.get_in_progress()) == 2

    def test_clear(self):
        recorder = ReceiptRecorder()
        recorder.start_http_receipt(method="GET", url="http://example.com/")

        recorder.clear()

        assert recorder.get_receipts() == []
        assert recorder.get_in_progress() == []

    def test_concurrent_recording(self):
        """Receipts from many threads are all kept."""
        recorder = ReceiptRecorder()

        def record(i):
            receipt = recorder.start_http_receipt(method="GET", url=f"http://example.com/{i}")
            recorder.complete(receipt, response={"status_code": 200})

        threads = [threading.Thread(target=record, args=(i,)) for i in range(32)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(recorder.get_receipts()) == 32
        assert recorder.get_in_progress() == []
