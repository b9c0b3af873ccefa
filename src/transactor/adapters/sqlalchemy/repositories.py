"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.orm import make_transient

from transactor.adapters.sqlalchemy.mappings import (
    bundle_table,
    display_table,
    field_attachment_table,
    field_storage_table,
    record_table,
    transaction_table,
    transaction_type_table,
)
from transactor.domain.model import (
    DEFAULT_DISPLAY_MODE,
    TRANSACTION_RECORD_TYPE,
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
    from collections.abc import Sequence

    from sqlalchemy.orm import Session


class SqlAlchemyBundleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Bundle) -> None:
        self.session.add(entity)


class SqlAlchemyBundleInfo:
    """Bundles of stored record types; transaction bundles are the transaction type ids."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_bundles(self, record_type: str) -> set[str]:
        if record_type == TRANSACTION_RECORD_TYPE:
            stmt = select(transaction_type_table.c.id)
        else:
            stmt = select(bundle_table.c.name).where(bundle_table.c.record_type == record_type)
        return set(self.session.execute(stmt).scalars())


class SqlAlchemyRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Record) -> None:
        self.session.add(entity)
        self.session.flush()

    def get(self, record_type: str, record_id: int) -> Record | None:
        stmt = (
            select(Record)
            .where(record_table.c.id == record_id)
            .where(record_table.c.record_type == record_type)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyTransactionTypeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: TransactionType) -> None:
        entity.prepare_for_save()
        self.session.add(entity)
        self.session.flush()

    def get(self, type_id: str) -> TransactionType | None:
        return self.session.get(TransactionType, type_id)

    def list_all(self) -> Sequence[TransactionType]:
        stmt = select(TransactionType).order_by(transaction_type_table.c.id)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyTransactionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Transaction) -> None:
        self.session.add(entity)
        self.session.flush()

    def get(self, transaction_id: int) -> Transaction | None:
        return self.session.get(Transaction, transaction_id)

    def discard(self, entity: Transaction) -> None:
        if entity in self.session:
            if entity.id is not None:
                self.session.delete(entity)
                self.session.flush()
            make_transient(entity)
        entity.id = None

    def find_most_recent_executed(
        self,
        type_id: str,
        target_id: int,
        *,
        exclude_id: int | None = None,
    ) -> Transaction | None:
        stmt = (
            select(Transaction)
            .where(transaction_table.c._type_id == type_id)  # noqa: SLF001
            .where(transaction_table.c.target_id == target_id)
            .where(transaction_table.c.status == TransactionStatus.EXECUTED)
            .order_by(transaction_table.c.executed_at.desc(), transaction_table.c.id.desc())
            .limit(1)
            .with_for_update(of=transaction_table)
        )
        if exclude_id is not None:
            stmt = stmt.where(transaction_table.c.id != exclude_id)
        return self.session.execute(stmt).unique().scalar_one_or_none()


class SqlAlchemyFieldSchemaRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def field_exists(self, record_type: str, field_name: str) -> bool:
        return self.get_storage(record_type, field_name) is not None

    def get_storage(self, record_type: str, field_name: str) -> FieldStorage | None:
        stmt = (
            select(FieldStorage)
            .where(field_storage_table.c.record_type == record_type)
            .where(field_storage_table.c.field_name == field_name)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def storages_of_type(self, record_type: str, field_type: str) -> Sequence[FieldStorage]:
        stmt = (
            select(FieldStorage)
            .where(field_storage_table.c.record_type == record_type)
            .where(field_storage_table.c.field_type == field_type)
            .order_by(field_storage_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def add_storage(self, storage: FieldStorage) -> None:
        self.session.add(storage)
        self.session.flush()

    def load_field(self, record_type: str, bundle: str, field_name: str) -> FieldAttachment | None:
        stmt = (
            select(FieldAttachment)
            .where(field_attachment_table.c.record_type == record_type)
            .where(field_attachment_table.c.bundle == bundle)
            .where(field_attachment_table.c.field_name == field_name)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def attachments_of(self, record_type: str, field_name: str) -> Sequence[FieldAttachment]:
        stmt = (
            select(FieldAttachment)
            .where(field_attachment_table.c.record_type == record_type)
            .where(field_attachment_table.c.field_name == field_name)
            .order_by(field_attachment_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def add_attachment(self, attachment: FieldAttachment) -> None:
        self.session.add(attachment)
        self.session.flush()


class SqlAlchemyDisplayRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def load_or_create(
        self,
        record_type: str,
        bundle: str,
        context: DisplayContext,
        mode: str = DEFAULT_DISPLAY_MODE,
    ) -> Display:
        display = self.session.get(Display, (record_type, bundle, context, mode))
        if display is None:
            display = Display(record_type=record_type, bundle=bundle, context=context, mode=mode)
        return display

    def save(self, display: Display) -> None:
        self.session.add(display)
        self.session.flush()


if TYPE_CHECKING:
    from transactor.domain.ports import (
        BundleInfo,
        BundleRepository,
        DisplayRepository,
        FieldSchemaRepository,
        RecordRepository,
        TransactionRepository,
        TransactionTypeRepository,
    )

    _session_stub = cast("Session", object())
    _bundle_repo: BundleRepository = SqlAlchemyBundleRepository(_session_stub)
    _bundle_info: BundleInfo = SqlAlchemyBundleInfo(_session_stub)
    _record_repo: RecordRepository = SqlAlchemyRecordRepository(_session_stub)
    _type_repo: TransactionTypeRepository = SqlAlchemyTransactionTypeRepository(_session_stub)
    _transaction_repo: TransactionRepository = SqlAlchemyTransactionRepository(_session_stub)
    _field_repo: FieldSchemaRepository = SqlAlchemyFieldSchemaRepository(_session_stub)
    _display_repo: DisplayRepository = SqlAlchemyDisplayRepository(_session_stub)
