"""Domain model for transactions, their types and the records they target."""

from __future__ import annotations

from .actor import ANONYMOUS, Actor
from .enums import (
    DEFAULT_DISPLAY_MODE,
    REFERENCE_FIELD_TYPE,
    TRANSACTION_RECORD_TYPE,
    DisplayContext,
    TransactionStatus,
)
from .record import Bundle, Record
from .schema import Display, FieldAttachment, FieldStorage
from .transaction import Transaction
from .transaction_type import TransactionType, new_transaction_type, sanitize_bundles

__all__ = [
    "ANONYMOUS",
    "DEFAULT_DISPLAY_MODE",
    "REFERENCE_FIELD_TYPE",
    "TRANSACTION_RECORD_TYPE",
    "Actor",
    "Bundle",
    "Display",
    "DisplayContext",
    "FieldAttachment",
    "FieldStorage",
    "Record",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "new_transaction_type",
    "sanitize_bundles",
]
