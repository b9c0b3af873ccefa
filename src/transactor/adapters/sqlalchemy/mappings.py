"""SQLAlchemy mapping metadata for the transactor domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import configure_mappers, relationship

from transactor.domain.model import (
    Bundle,
    Display,
    DisplayContext,
    FieldAttachment,
    FieldStorage,
    Record,
    Transaction,
    TransactionStatus,
    TransactionType,
)

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

JSONDict = MutableDict.as_mutable(JSON)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Schema tables ---------------------------------------------------------------

bundle_table = Table(
    "bundle",
    mapper_registry.metadata,
    Column("record_type", String(64), primary_key=True),
    Column("name", String(64), primary_key=True),
    Column("label", String, nullable=True),
)

field_storage_table = Table(
    "field_storage",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("record_type", String(64), nullable=False),
    Column("field_name", String(32), nullable=False),
    Column("field_type", String(64), nullable=False),
    Column("settings", JSONDict, nullable=False, default=dict),
    UniqueConstraint("record_type", "field_name"),
)

field_attachment_table = Table(
    "field_attachment",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("record_type", String(64), nullable=False),
    Column("bundle", String(64), nullable=False),
    Column("field_name", String(32), nullable=False),
    Column("label", String, nullable=False),
    Column("required", Boolean, nullable=False, default=False),
    Column("handler_settings", JSONDict, nullable=False, default=dict),
    UniqueConstraint("record_type", "bundle", "field_name"),
)

display_table = Table(
    "display",
    mapper_registry.metadata,
    Column("record_type", String(64), primary_key=True),
    Column("bundle", String(64), primary_key=True),
    Column(
        "context",
        Enum(
            DisplayContext,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        primary_key=True,
    ),
    Column("mode", String(64), primary_key=True),
    Column("enabled", Boolean, nullable=False, default=True),
    Column("components", JSONDict, nullable=False, default=dict),
)

# Record tables ---------------------------------------------------------------

record_table = Table(
    "record",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("record_type", String(64), nullable=False, index=True),
    Column("bundle", String(64), nullable=False),
    Column("label", String, nullable=False),
    Column("field_values", JSONDict, nullable=False, default=dict),
)

transaction_type_table = Table(
    "transaction_type",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("label", String, nullable=False),
    Column("target_entity_type", String(64), nullable=False),
    Column("transactor_id", String(64), key="_transactor_id", nullable=True),
    Column(
        "transactor_settings",
        JSONDict,
        key="_transactor_settings",
        nullable=False,
        default=dict,
    ),
    Column("bundles", JSON, key="_bundles", nullable=False, default=list),
    Column("options", JSONDict, key="_options", nullable=False, default=dict),
)

transaction_table = Table(
    "transaction",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "type_id",
        String(64),
        ForeignKey("transaction_type.id"),
        key="_type_id",
        nullable=False,
    ),
    Column("target_id", Integer, nullable=True),
    Column(
        "status",
        Enum(
            TransactionStatus,
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        nullable=False,
    ),
    Column("field_values", JSONDict, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("executed_at", UTCDateTime(), nullable=True),
    Column("executed_by", String, nullable=True),
)

Index(
    "ix_transaction_type_target",
    transaction_table.c._type_id,  # noqa: SLF001
    transaction_table.c.target_id,
    transaction_table.c.status,
    transaction_table.c.executed_at,
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Bundle, bundle_table)
    mapper_registry.map_imperatively(FieldStorage, field_storage_table)
    mapper_registry.map_imperatively(FieldAttachment, field_attachment_table)
    mapper_registry.map_imperatively(Display, display_table)
    mapper_registry.map_imperatively(Record, record_table)
    mapper_registry.map_imperatively(TransactionType, transaction_type_table)

    mapper_registry.map_imperatively(
        Transaction,
        transaction_table,
        properties={
            "type": relationship(TransactionType, lazy="joined", innerjoin=True),
        },
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
