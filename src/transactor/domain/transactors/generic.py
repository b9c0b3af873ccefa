"""A simple multipurpose transactor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from transactor.domain.fields import FieldDeclaration
from transactor.domain.model import REFERENCE_FIELD_TYPE

from .base import TransactorBase
from .contract import TransactorDefinition

if TYPE_CHECKING:
    from transactor.domain.model import Transaction

GENERIC_TRANSACTOR_ID = "generic"

GENERIC_DEFINITION = TransactorDefinition(
    id=GENERIC_TRANSACTOR_ID,
    title="Generic",
    description="A simple multipurpose transactor.",
    transaction_fields=(
        FieldDeclaration(
            name="log_message",
            field_type="string",
            title="Log message",
            description="A log message with details about the transaction.",
        ),
    ),
    target_entity_fields=(
        FieldDeclaration(
            name="last_transaction",
            field_type=REFERENCE_FIELD_TYPE,
            title="Last transaction",
            description=(
                "A reference field in the target entity type to update with a reference "
                "to the last executed transaction of this type."
            ),
        ),
    ),
)


class GenericTransactor(TransactorBase):
    """Points the target's ``last_transaction`` field at each executed transaction."""

    def execute_transaction(
        self,
        transaction: Transaction,
        last_executed: Transaction | None = None,
    ) -> bool:
        if not super().execute_transaction(transaction, last_executed):
            return False

        field_name = transaction.type.plugin_settings.get("last_transaction")
        target = self.get_target(transaction)
        if (
            isinstance(field_name, str)
            and target is not None
            and self.context.repositories.fields.load_field(
                target.record_type, target.bundle, field_name
            )
            is not None
        ):
            target.set_field(field_name, transaction.id)

        return True

    def get_transaction_details(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> list[str]:
        details = super().get_transaction_details(transaction, locale)
        field_name = transaction.type.plugin_settings.get("log_message")
        message = transaction.get_field(field_name) if isinstance(field_name, str) else None
        if message:
            details.append(self._t("Log message: {message}", locale, message=message))
        return details
