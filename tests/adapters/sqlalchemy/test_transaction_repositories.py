"""Tests for the SQLAlchemy transaction repositories."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session  # noqa: TC002

from transactor.adapters.sqlalchemy.repositories import (
    SqlAlchemyBundleInfo,
    SqlAlchemyBundleRepository,
    SqlAlchemyDisplayRepository,
    SqlAlchemyFieldSchemaRepository,
    SqlAlchemyRecordRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyTransactionTypeRepository,
)
from transactor.domain.model import (
    Bundle,
    DisplayContext,
    FieldAttachment,
    FieldStorage,
    Record,
    Transaction,
    TransactionType,
    new_transaction_type,
)

EXECUTED_AT = datetime(2026, 2, 1, 8, 30, tzinfo=UTC)


def _transaction_type(session: Session, type_id: str = "restock") -> TransactionType:
    transaction_type = new_transaction_type(
        id=type_id,
        label=type_id.title(),
        target_entity_type="inventory_item",
        transactor_id="generic",
        bundles=["tools", "", "tools"],
    )
    SqlAlchemyTransactionTypeRepository(session).add(transaction_type)
    return transaction_type


def _executed(
    repository: SqlAlchemyTransactionRepository,
    transaction_type: TransactionType,
    target_id: int,
    at: datetime,
) -> Transaction:
    transaction = Transaction(type=transaction_type, target_id=target_id)
    transaction.mark_executed(at=at, by="test")
    repository.add(transaction)
    return transaction


def test_transaction_type_round_trip(sqlite_session: Session) -> None:
    transaction_type = _transaction_type(sqlite_session)
    transaction_type.set_plugin_settings({"last_transaction": "field_last_restock"})
    transaction_type.set_option("auto_execute", True)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    repository = SqlAlchemyTransactionTypeRepository(sqlite_session)
    stored = repository.get("restock")

    assert stored is not None
    assert stored.plugin_id == "generic"
    assert stored.plugin_settings == {"last_transaction": "field_last_restock"}
    assert stored.bundles == ("tools",)
    assert stored.get_option("auto_execute") is True
    assert [item.id for item in repository.list_all()] == ["restock"]


def test_record_lookup_is_scoped_by_record_type(sqlite_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(sqlite_session)
    item = Record(record_type="inventory_item", bundle="tools", label="Socket wrench")
    repository.add(item)
    sqlite_session.commit()

    assert item.id is not None
    assert repository.get("inventory_item", item.id) is item
    assert repository.get("warehouse", item.id) is None


def test_record_field_changes_are_tracked(sqlite_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(sqlite_session)
    item = Record(record_type="inventory_item", bundle="tools", label="Socket wrench")
    repository.add(item)
    sqlite_session.commit()

    item_id = item.id
    assert item_id is not None

    item.set_field("field_last_restock", 3)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    stored = repository.get("inventory_item", item_id)
    assert stored is not None
    assert stored.get_field("field_last_restock") == 3


def test_bundle_info_lists_bundles_and_transaction_types(sqlite_session: Session) -> None:
    bundles = SqlAlchemyBundleRepository(sqlite_session)
    bundles.add(Bundle(record_type="inventory_item", name="tools"))
    bundles.add(Bundle(record_type="inventory_item", name="bolts"))
    bundles.add(Bundle(record_type="warehouse", name="main"))
    _transaction_type(sqlite_session, "restock")
    _transaction_type(sqlite_session, "audit")
    sqlite_session.commit()

    info = SqlAlchemyBundleInfo(sqlite_session)

    assert info.list_bundles("inventory_item") == {"tools", "bolts"}
    assert info.list_bundles("transaction") == {"restock", "audit"}
    assert info.list_bundles("unknown") == set()


def test_most_recent_executed_orders_by_time_then_id(sqlite_session: Session) -> None:
    transaction_type = _transaction_type(sqlite_session)
    repository = SqlAlchemyTransactionRepository(sqlite_session)

    _executed(repository, transaction_type, 42, EXECUTED_AT.replace(hour=7))
    tie_low = _executed(repository, transaction_type, 42, EXECUTED_AT)
    tie_high = _executed(repository, transaction_type, 42, EXECUTED_AT)
    _executed(repository, transaction_type, 7, EXECUTED_AT.replace(hour=9))
    pending = Transaction(type=transaction_type, target_id=42)
    repository.add(pending)
    sqlite_session.commit()

    assert tie_low.id is not None
    assert tie_high.id is not None
    assert tie_high.id > tie_low.id
    assert repository.find_most_recent_executed("restock", 42) is tie_high
    assert repository.find_most_recent_executed("restock", 42, exclude_id=tie_high.id) is tie_low
    assert repository.find_most_recent_executed("restock", 99) is None
    assert repository.find_most_recent_executed("audit", 42) is None


def test_discard_returns_staged_transaction_to_new(sqlite_session: Session) -> None:
    transaction_type = _transaction_type(sqlite_session)
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    transaction = Transaction(type=transaction_type, target_id=42)
    repository.add(transaction)
    staged_id = transaction.id
    assert staged_id is not None

    repository.discard(transaction)
    sqlite_session.commit()

    assert transaction.is_new
    assert transaction not in sqlite_session
    assert repository.get(staged_id) is None
    assert sqlite_session.scalars(select(Transaction)).all() == []


def test_executed_transaction_round_trip(sqlite_session: Session) -> None:
    transaction_type = _transaction_type(sqlite_session)
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    transaction = Transaction(
        type=transaction_type,
        target_id=42,
        field_values={"field_log_message": "Delivered 12 units"},
    )
    transaction.mark_executed(at=EXECUTED_AT, by="warehouse")
    repository.add(transaction)
    sqlite_session.commit()
    transaction_id = transaction.id
    assert transaction_id is not None
    sqlite_session.expunge_all()

    stored = repository.get(transaction_id)

    assert stored is not None
    assert stored.is_executed
    assert stored.type_id == "restock"
    assert stored.executed_at == EXECUTED_AT
    assert stored.executed_by == "warehouse"
    assert stored.get_field("field_log_message") == "Delivered 12 units"
    assert stored.created_at.tzinfo is not None


def test_field_schema_repository_queries(sqlite_session: Session) -> None:
    repository = SqlAlchemyFieldSchemaRepository(sqlite_session)
    repository.add_storage(
        FieldStorage(
            record_type="inventory_item",
            field_name="field_last_restock",
            field_type="entity_reference",
            settings={"target_type": "transaction"},
        )
    )
    repository.add_storage(
        FieldStorage(record_type="inventory_item", field_name="field_note", field_type="string")
    )
    repository.add_attachment(
        FieldAttachment(
            record_type="inventory_item",
            bundle="tools",
            field_name="field_last_restock",
            label="Last restock",
            handler_settings={"target_bundles": ["restock"]},
        )
    )
    sqlite_session.commit()

    assert repository.field_exists("inventory_item", "field_note")
    assert not repository.field_exists("warehouse", "field_note")
    references = repository.storages_of_type("inventory_item", "entity_reference")
    assert [storage.field_name for storage in references] == ["field_last_restock"]
    attachment = repository.load_field("inventory_item", "tools", "field_last_restock")
    assert attachment is not None
    assert attachment.handler_settings == {"target_bundles": ["restock"]}
    assert repository.load_field("inventory_item", "bolts", "field_last_restock") is None
    attachments = repository.attachments_of("inventory_item", "field_last_restock")
    assert [item.bundle for item in attachments] == ["tools"]


def test_display_repository_loads_saved_display(sqlite_session: Session) -> None:
    repository = SqlAlchemyDisplayRepository(sqlite_session)

    display = repository.load_or_create("inventory_item", "tools", DisplayContext.FORM)
    display.enable_field("field_last_restock", {"weight": 0})
    repository.save(display)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    reloaded = repository.load_or_create("inventory_item", "tools", DisplayContext.FORM)
    fresh = repository.load_or_create("inventory_item", "tools", DisplayContext.VIEW)

    assert reloaded.components == {"field_last_restock": {"weight": 0}}
    assert fresh.components == {}
