"""
Receipts Module

Provides receipt recording for outgoing HTTP requests.
Receipts enable auditing of what the facade sent and received.
"""

from .models import HTTPReceipt, fingerprint
from .recorder import ReceiptRecorder

__all__ = [
    "HTTPReceipt",
    "ReceiptRecorder",
    "fingerprint",
]
