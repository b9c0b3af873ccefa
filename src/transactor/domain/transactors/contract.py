"""The transactor plugin contract.

A transactor gives a transaction type its meaning: when a transaction may run,
what running it does, how it is described, and which fields it needs on the
transaction and on the target record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from transactor.domain.model import ANONYMOUS, Actor
from transactor.domain.ports.translation import FormatTranslator, Translator

if TYPE_CHECKING:
    from collections.abc import Mapping

    from transactor.domain.fields import FieldDeclaration
    from transactor.domain.model import Transaction, TransactionType
    from transactor.domain.ports import TransactionRepositories

    from .configuration import ConfigurationIssue, ConfigurationSchema, ConfigurationSubmission


@dataclass(frozen=True, slots=True, kw_only=True)
class TransactorDefinition:
    """Static description of a transactor variant."""

    id: str
    title: str
    description: str = ""
    transaction_fields: tuple[FieldDeclaration, ...] = ()
    target_entity_fields: tuple[FieldDeclaration, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class TransactorContext:
    """Collaborators handed to every transactor instance."""

    repositories: TransactionRepositories
    actor: Actor = ANONYMOUS
    field_prefix: str = "field_"
    field_name_max_length: int = 32
    translate: Translator = field(default_factory=FormatTranslator)


@runtime_checkable
class TransactorPlugin(Protocol):
    @property
    def definition(self) -> TransactorDefinition: ...

    @property
    def configuration(self) -> dict[str, object]: ...

    def default_configuration(self) -> dict[str, object]: ...

    def set_configuration(self, configuration: Mapping[str, object]) -> None: ...

    def validate_transaction(self, transaction: Transaction) -> bool:
        """Return whether ``transaction`` may be executed. Must not mutate anything."""
        ...

    def execute_transaction(
        self,
        transaction: Transaction,
        last_executed: Transaction | None = None,
    ) -> bool:
        """Apply the side effects of ``transaction``.

        ``last_executed`` is the previous executed transaction with the same type
        and target, if any. Returning ``False`` declines execution and must leave
        the transaction pending. Status validation is not repeated here.
        """
        ...

    def get_transaction_description(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> str: ...

    def get_transaction_details(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> list[str]: ...

    def get_execution_indications(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> str: ...

    def build_configuration_form(self, transaction_type: TransactionType) -> ConfigurationSchema: ...

    def validate_configuration_form(
        self,
        transaction_type: TransactionType,
        schema: ConfigurationSchema,
        submission: ConfigurationSubmission,
    ) -> list[ConfigurationIssue]: ...

    def submit_configuration_form(
        self,
        transaction_type: TransactionType,
        schema: ConfigurationSchema,
        submission: ConfigurationSubmission,
    ) -> None: ...
