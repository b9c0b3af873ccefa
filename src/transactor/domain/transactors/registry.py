"""Registry mapping transactor ids to factories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from transactor.domain.errors import (
    DuplicateTransactorError,
    TransactorNotConfiguredError,
    UnknownTransactorError,
)

from .generic import GENERIC_DEFINITION, GenericTransactor

if TYPE_CHECKING:
    from transactor.domain.model import TransactionType

    from .contract import TransactorContext, TransactorDefinition, TransactorPlugin

log = logging.getLogger(__name__)

type TransactorFactory = Callable[
    [TransactorDefinition, TransactorContext, Mapping[str, object]],
    TransactorPlugin,
]


class TransactorRegistry:
    """Transactor variants known to the application.

    Factories receive their collaborators explicitly through the context; the
    registry holds no instances.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[TransactorDefinition, TransactorFactory]] = {}

    def register(self, definition: TransactorDefinition, factory: TransactorFactory) -> None:
        if definition.id in self._entries:
            raise DuplicateTransactorError(definition.id)
        self._entries[definition.id] = (definition, factory)
        log.debug("Registered transactor %s", definition.id)

    def __contains__(self, transactor_id: object) -> bool:
        return transactor_id in self._entries

    def definitions(self) -> tuple[TransactorDefinition, ...]:
        return tuple(definition for definition, _ in self._entries.values())

    def get_definition(self, transactor_id: str) -> TransactorDefinition:
        try:
            return self._entries[transactor_id][0]
        except KeyError:
            raise UnknownTransactorError(transactor_id) from None

    def resolve(
        self,
        transactor_id: str,
        context: TransactorContext,
        configuration: Mapping[str, object] | None = None,
    ) -> TransactorPlugin:
        try:
            definition, factory = self._entries[transactor_id]
        except KeyError:
            raise UnknownTransactorError(transactor_id) from None
        return factory(definition, context, configuration or {})

    def resolve_for(
        self,
        transaction_type: TransactionType,
        context: TransactorContext,
    ) -> TransactorPlugin:
        """Instantiate the transactor bound to ``transaction_type`` with its settings."""

        plugin_id = transaction_type.plugin_id
        if not plugin_id:
            raise TransactorNotConfiguredError(transaction_type.id)
        return self.resolve(plugin_id, context, transaction_type.plugin_settings)


def default_registry() -> TransactorRegistry:
    registry = TransactorRegistry()
    registry.register(GENERIC_DEFINITION, GenericTransactor)
    return registry
