"""Transactions: ordered, auditable events against a target record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .enums import TransactionStatus

if TYPE_CHECKING:
    from .transaction_type import TransactionType


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Transaction:
    """One transaction of a given type against one target record.

    States: new-pending (no id) -> persisted-pending -> executed. Executed
    transactions are history and are never executed again.
    """

    type: TransactionType
    target_id: int | None = None
    id: int | None = None
    status: TransactionStatus = TransactionStatus.PENDING
    field_values: dict[str, object] = field(default_factory=dict[str, object])
    created_at: datetime = field(default_factory=_now)
    executed_at: datetime | None = None
    executed_by: str | None = None

    @property
    def type_id(self) -> str | None:
        return self.type.id

    @property
    def target_entity_type(self) -> str:
        return self.type.target_entity_type

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING

    @property
    def is_executed(self) -> bool:
        return self.status == TransactionStatus.EXECUTED

    def get_field(self, name: str, default: object = None) -> object:
        return self.field_values.get(name, default)

    def set_field(self, name: str, value: object) -> None:
        self.field_values[name] = value

    def mark_executed(self, *, at: datetime | None = None, by: str | None = None) -> None:
        if self.is_executed:
            raise ValueError("transaction already executed")
        self.status = TransactionStatus.EXECUTED
        self.executed_at = at or _now()
        self.executed_by = by
