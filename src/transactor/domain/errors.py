"""Hard errors raised by the transaction core.

Business outcomes (rejected executions, configuration issues) are values, not
exceptions; the classes here cover faults the caller cannot treat as normal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from transactor.domain.transactors.configuration import ConfigurationIssue


class TransactorError(Exception):
    """Base class for transaction core errors."""


class UnknownTransactorError(TransactorError, LookupError):
    """No transactor is registered under the requested id."""

    def __init__(self, transactor_id: str) -> None:
        self.transactor_id = transactor_id
        super().__init__(f"Unknown transactor '{transactor_id}'")


class DuplicateTransactorError(TransactorError):
    """A transactor id was registered twice."""

    def __init__(self, transactor_id: str) -> None:
        self.transactor_id = transactor_id
        super().__init__(f"Transactor '{transactor_id}' is already registered")


class TransactorNotConfiguredError(TransactorError):
    """A transaction type has no transactor bound to it."""

    def __init__(self, type_id: str | None) -> None:
        self.type_id = type_id
        super().__init__(f"Transaction type '{type_id}' has no transactor")


class InvalidConfigurationError(TransactorError, ValueError):
    """A transactor configuration was submitted without passing validation."""

    def __init__(self, issues: Sequence[ConfigurationIssue]) -> None:
        self.issues = tuple(issues)
        details = "; ".join(f"{issue.element}: {issue.message}" for issue in self.issues)
        super().__init__(f"Invalid transactor configuration: {details}")
