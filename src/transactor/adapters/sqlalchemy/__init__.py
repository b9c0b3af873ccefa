"""SQLAlchemy adapter package for transactor."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyBundleInfo,
    SqlAlchemyBundleRepository,
    SqlAlchemyDisplayRepository,
    SqlAlchemyFieldSchemaRepository,
    SqlAlchemyRecordRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyTransactionTypeRepository,
)
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyBundleInfo",
    "SqlAlchemyBundleRepository",
    "SqlAlchemyDisplayRepository",
    "SqlAlchemyFieldSchemaRepository",
    "SqlAlchemyRecordRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyTransactionTypeRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
