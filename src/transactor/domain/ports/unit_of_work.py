"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from transactor.domain.ports.persistence import (
        BundleRepository,
        RecordRepository,
        TransactionRepository,
        TransactionTypeRepository,
    )
    from transactor.domain.ports.schema import BundleInfo, DisplayRepository, FieldSchemaRepository


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...  # the repo list itself should be immutable

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class TransactionRepositories(RepositoryCollection):
    """Repositories required to configure and execute transactions."""

    transaction_types: TransactionTypeRepository
    transactions: TransactionRepository
    records: RecordRepository
    bundles: BundleRepository
    bundle_info: BundleInfo
    fields: FieldSchemaRepository
    displays: DisplayRepository


type TransactionUnitOfWork = UnitOfWork[TransactionRepositories]
