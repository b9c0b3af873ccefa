"""Typed outcomes of executing a transaction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from transactor.domain.model import Transaction


class ExecutionStatus(StrEnum):
    EXECUTED = "executed"
    REJECTED = "rejected"


class RejectionReason(StrEnum):
    """Why a transaction did not execute."""

    VALIDATION_FAILED = "validation_failed"
    """The transactor judged the transaction not executable (includes a missing target)."""

    EXECUTION_DECLINED = "execution_declined"
    """The transactor ran and decided not to apply the transaction."""

    ALREADY_EXECUTED = "already_executed"
    """The transaction is history already; the transactor was not consulted."""


@dataclass(frozen=True, slots=True, kw_only=True)
class Executed:
    transaction: Transaction
    last_executed: Transaction | None = None
    status: Literal[ExecutionStatus.EXECUTED] = ExecutionStatus.EXECUTED

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True, kw_only=True)
class Rejected:
    transaction: Transaction
    reason: RejectionReason
    status: Literal[ExecutionStatus.REJECTED] = ExecutionStatus.REJECTED

    @property
    def ok(self) -> bool:
        return False


type ExecutionResult = Executed | Rejected
