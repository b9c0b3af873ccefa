"""Transaction execution engine."""

from __future__ import annotations

from .engine import TransactionExecutionEngine
from .results import Executed, ExecutionResult, ExecutionStatus, Rejected, RejectionReason

__all__ = [
    "Executed",
    "ExecutionResult",
    "ExecutionStatus",
    "Rejected",
    "RejectionReason",
    "TransactionExecutionEngine",
]
