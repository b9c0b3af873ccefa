"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from transactor.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from transactor.config import get_actor_config, get_field_config
from transactor.domain.execution import Executed, TransactionExecutionEngine
from transactor.domain.model import Bundle, Record, Transaction, new_transaction_type
from transactor.domain.ports.unit_of_work import TransactionUnitOfWork
from transactor.domain.transactors import TransactorContext, default_registry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from transactor.config import FieldConfig
    from transactor.domain.execution import ExecutionResult
    from transactor.domain.model import Actor, TransactionType
    from transactor.domain.ports import TransactionRepositories
    from transactor.domain.transactors import (
        ConfigurationIssue,
        ConfigurationSchema,
        ConfigurationSubmission,
        TransactorRegistry,
    )

UnitOfWorkFactory = Callable[[], TransactionUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransactionSummary:
    """Human-readable view of a transaction as produced by its transactor."""

    id: int | None
    type_id: str | None
    target_id: int | None
    status: str
    description: str
    details: tuple[str, ...]
    indications: str


def _unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def _context(
    repositories: TransactionRepositories,
    *,
    actor: Actor | None,
    field_config: FieldConfig | None,
) -> TransactorContext:
    fields = field_config or get_field_config()
    return TransactorContext(
        repositories=repositories,
        actor=actor or get_actor_config().to_actor(),
        field_prefix=fields.prefix,
        field_name_max_length=fields.name_max_length,
    )


def _require_type(repositories: TransactionRepositories, type_id: str) -> TransactionType:
    transaction_type = repositories.transaction_types.get(type_id)
    if transaction_type is None:
        raise LookupError(f"Unknown transaction type '{type_id}'")
    return transaction_type


def _require_transaction(repositories: TransactionRepositories, transaction_id: int) -> Transaction:
    transaction = repositories.transactions.get(transaction_id)
    if transaction is None:
        raise LookupError(f"Unknown transaction {transaction_id}")
    return transaction


# Records -----------------------------------------------------------------------


def create_bundle(
    record_type: str,
    name: str,
    *,
    label: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Bundle:
    """Persist a bundle of ``record_type``."""

    bundle = Bundle(record_type=record_type, name=name, label=label)
    with _unit_of_work(unit_of_work_factory)() as uow:
        uow.repositories.bundles.add(bundle)
        uow.commit()
    log.info("Created bundle %s of %s", name, record_type)
    return bundle


def create_record(
    record_type: str,
    bundle: str,
    label: str,
    *,
    field_values: Mapping[str, object] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Record:
    """Persist a target record and return it with its id assigned."""

    record = Record(
        record_type=record_type,
        bundle=bundle,
        label=label,
        field_values=dict(field_values or {}),
    )
    with _unit_of_work(unit_of_work_factory)() as uow:
        uow.repositories.records.add(record)
        uow.commit()
    log.info("Created %s record %s", record_type, record.id)
    return record


# Transaction types ---------------------------------------------------------------


def create_transaction_type(
    type_id: str,
    label: str,
    target_entity_type: str,
    transactor_id: str,
    *,
    bundles: Iterable[str] = (),
    options: Mapping[str, object] | None = None,
    registry: TransactorRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> TransactionType:
    """Persist a transaction type bound to a registered transactor."""

    effective_registry = registry or default_registry()
    # Raises UnknownTransactorError for ids nobody registered.
    effective_registry.get_definition(transactor_id)

    transaction_type = new_transaction_type(
        id=type_id,
        label=label,
        target_entity_type=target_entity_type,
        transactor_id=transactor_id,
        bundles=bundles,
        options=options,
    )
    with _unit_of_work(unit_of_work_factory)() as uow:
        if uow.repositories.transaction_types.get(type_id) is not None:
            raise ValueError(f"Transaction type '{type_id}' already exists")
        uow.repositories.transaction_types.add(transaction_type)
        uow.commit()
    log.info("Created transaction type %s using transactor %s", type_id, transactor_id)
    return transaction_type


def describe_configuration(
    type_id: str,
    *,
    actor: Actor | None = None,
    field_config: FieldConfig | None = None,
    registry: TransactorRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ConfigurationSchema:
    """Return the configuration schema the type's transactor offers to ``actor``."""

    effective_registry = registry or default_registry()
    with _unit_of_work(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        transaction_type = _require_type(repositories, type_id)
        context = _context(repositories, actor=actor, field_config=field_config)
        transactor = effective_registry.resolve_for(transaction_type, context)
        return transactor.build_configuration_form(transaction_type)


def configure_transaction_type(
    type_id: str,
    submission: ConfigurationSubmission,
    *,
    actor: Actor | None = None,
    field_config: FieldConfig | None = None,
    registry: TransactorRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[ConfigurationIssue]:
    """Apply ``submission`` to the type's transactor.

    Returns the validation issues; the configuration (and any provisioned
    field) is committed only when there are none.
    """

    effective_registry = registry or default_registry()
    with _unit_of_work(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        transaction_type = _require_type(repositories, type_id)
        context = _context(repositories, actor=actor, field_config=field_config)
        transactor = effective_registry.resolve_for(transaction_type, context)
        schema = transactor.build_configuration_form(transaction_type)

        issues = transactor.validate_configuration_form(transaction_type, schema, submission)
        if issues:
            log.info("Rejected configuration of %s: %s issue(s)", type_id, len(issues))
            uow.rollback()
            return issues

        transactor.submit_configuration_form(transaction_type, schema, submission)
        repositories.transaction_types.add(transaction_type)
        uow.commit()
    return []


# Transactions --------------------------------------------------------------------


def create_transaction(
    type_id: str,
    target_id: int,
    *,
    field_values: Mapping[str, object] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Transaction:
    """Persist a pending transaction of ``type_id`` against record ``target_id``."""

    with _unit_of_work(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        transaction = Transaction(
            type=_require_type(repositories, type_id),
            target_id=target_id,
            field_values=dict(field_values or {}),
        )
        repositories.transactions.add(transaction)
        uow.commit()
    log.info("Created pending transaction %s of type %s", transaction.id, type_id)
    return transaction


def execute_transaction(
    transaction_id: int,
    *,
    actor: Actor | None = None,
    registry: TransactorRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ExecutionResult:
    """Execute a stored transaction, committing only when it was executed.

    A rejected transaction is returned as loaded; closing the session discards
    whatever the transactor changed before declining.
    """

    effective_registry = registry or default_registry()
    with _unit_of_work(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        transaction = _require_transaction(repositories, transaction_id)
        engine = TransactionExecutionEngine(
            effective_registry,
            _context(repositories, actor=actor, field_config=None),
        )
        result = engine.execute(transaction)
        if isinstance(result, Executed):
            uow.commit()
    return result


def describe_transaction(
    transaction_id: int,
    *,
    locale: str | None = None,
    registry: TransactorRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> TransactionSummary:
    """Describe a stored transaction through its transactor."""

    effective_registry = registry or default_registry()
    with _unit_of_work(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        transaction = _require_transaction(repositories, transaction_id)
        transactor = effective_registry.resolve_for(
            transaction.type,
            _context(repositories, actor=None, field_config=None),
        )
        return TransactionSummary(
            id=transaction.id,
            type_id=transaction.type_id,
            target_id=transaction.target_id,
            status=str(transaction.status),
            description=transactor.get_transaction_description(transaction, locale),
            details=tuple(transactor.get_transaction_details(transaction, locale)),
            indications=transactor.get_execution_indications(transaction, locale),
        )
