"""Orchestrates validation and execution of transactions through their transactor."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .results import Executed, Rejected, RejectionReason

if TYPE_CHECKING:
    from collections.abc import Callable

    from transactor.domain.model import Transaction
    from transactor.domain.transactors import TransactorContext, TransactorRegistry

    from .results import ExecutionResult

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class TransactionExecutionEngine:
    """Runs each pending transaction at most once.

    Every call is one unit of work against the repositories in ``context``;
    committing it is up to the caller. The previous executed transaction is
    read from storage on every call, so no process affinity is assumed.
    """

    def __init__(
        self,
        registry: TransactorRegistry,
        context: TransactorContext,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.registry = registry
        self.context = context
        self.clock = clock

    def execute(self, transaction: Transaction) -> ExecutionResult:
        if transaction.is_executed:
            log.info("Transaction %s already executed", transaction.id)
            return Rejected(transaction=transaction, reason=RejectionReason.ALREADY_EXECUTED)

        transactor = self.registry.resolve_for(transaction.type, self.context)

        if not transactor.validate_transaction(transaction):
            log.info("Transaction %s failed validation", transaction.id)
            return Rejected(transaction=transaction, reason=RejectionReason.VALIDATION_FAILED)

        repositories = self.context.repositories
        staged = transaction.is_new
        if staged:
            # Executed transactions are referenced by id.
            repositories.transactions.add(transaction)

        last_executed = self._last_executed(transaction)

        if not transactor.execute_transaction(transaction, last_executed):
            log.info("Transaction %s declined by %s", transaction.id, transaction.type.plugin_id)
            if staged:
                repositories.transactions.discard(transaction)
            return Rejected(transaction=transaction, reason=RejectionReason.EXECUTION_DECLINED)

        if transaction.is_pending:
            transaction.mark_executed(at=self.clock(), by=self.context.actor.name)
        repositories.transactions.add(transaction)
        target = (
            repositories.records.get(transaction.target_entity_type, transaction.target_id)
            if transaction.target_id is not None
            else None
        )
        if target is not None:
            repositories.records.add(target)

        log.info(
            "Executed transaction %s of type %s on %s %s",
            transaction.id,
            transaction.type_id,
            transaction.target_entity_type,
            transaction.target_id,
        )
        return Executed(transaction=transaction, last_executed=last_executed)

    def _last_executed(self, transaction: Transaction) -> Transaction | None:
        type_id = transaction.type_id
        if type_id is None or transaction.target_id is None:
            return None
        return self.context.repositories.transactions.find_most_recent_executed(
            type_id,
            transaction.target_id,
            exclude_id=transaction.id,
        )
