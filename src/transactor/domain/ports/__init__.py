"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    BundleRepository,
    RecordRepository,
    Repository,
    TransactionRepository,
    TransactionTypeRepository,
)
from .schema import BundleInfo, DisplayRepository, FieldSchemaRepository
from .translation import FormatTranslator, Translator
from .unit_of_work import (
    RepositoryCollection,
    TransactionRepositories,
    TransactionUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "BundleInfo",
    "BundleRepository",
    "DisplayRepository",
    "FieldSchemaRepository",
    "FormatTranslator",
    "RecordRepository",
    "Repository",
    "RepositoryCollection",
    "TransactionRepositories",
    "TransactionRepository",
    "TransactionTypeRepository",
    "TransactionUnitOfWork",
    "Translator",
    "UnitOfWork",
]
