"""Ports for persisting records, transactions and transaction types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from transactor.domain.model import Bundle, Record, Transaction, TransactionType

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class BundleRepository(Repository[Bundle], Protocol):
    """Persistence contract for bundles of target record types."""


@runtime_checkable
class RecordRepository(Repository[Record], Protocol):
    """Persistence contract for target records."""

    def get(self, record_type: str, record_id: int) -> Record | None: ...


@runtime_checkable
class TransactionTypeRepository(Repository[TransactionType], Protocol):
    """Persistence contract for transaction types."""

    def get(self, type_id: str) -> TransactionType | None: ...

    def list_all(self) -> Sequence[TransactionType]: ...


@runtime_checkable
class TransactionRepository(Repository[Transaction], Protocol):
    """Persistence contract for transactions.

    ``add`` persists the transaction and assigns its id. Implementations must
    serialise concurrent executions sharing a (type, target) pair, e.g. by
    locking in ``find_most_recent_executed``.
    """

    def get(self, transaction_id: int) -> Transaction | None: ...

    def discard(self, entity: Transaction) -> None:
        """Undo ``add`` of a transaction that was new, returning it to the new state."""
        ...

    def find_most_recent_executed(
        self,
        type_id: str,
        target_id: int,
        *,
        exclude_id: int | None = None,
    ) -> Transaction | None:
        """Return the executed transaction with the latest execution time (ties: highest id)."""
        ...
