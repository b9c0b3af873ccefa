"""Domain enums and well-known identifiers (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

TRANSACTION_RECORD_TYPE: Final[str] = "transaction"
"""Record type of transactions themselves; its bundles are transaction type ids."""

REFERENCE_FIELD_TYPE: Final[str] = "entity_reference"
DEFAULT_DISPLAY_MODE: Final[str] = "default"


class TransactionStatus(StrEnum):
    PENDING = "pending"
    EXECUTED = "executed"


class DisplayContext(StrEnum):
    """Which presentation a display configures."""

    FORM = "form"
    VIEW = "view"
