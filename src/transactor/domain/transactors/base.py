"""Shared behaviour for transactor plugins."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from transactor.domain.errors import InvalidConfigurationError
from transactor.domain.fields import (
    FieldProvisioner,
    FieldScope,
    describe_target_field,
    describe_transaction_field,
    find_compatible_fields,
    suggest_machine_name,
)

from .configuration import (
    ConfigurationGroup,
    ConfigurationIssue,
    ConfigurationIssueKind,
    ConfigurationSchema,
    ExistingField,
    FieldBinding,
    GroupKey,
    NewField,
)

if TYPE_CHECKING:
    from transactor.domain.fields import FieldBindingDescriptor
    from transactor.domain.model import Record, Transaction, TransactionType

    from .configuration import ConfigurationSubmission, OptionDefinition
    from .contract import TransactorContext, TransactorDefinition

log = logging.getLogger(__name__)

_MACHINE_NAME = re.compile(r"[a-z0-9_]+")


def merge_deep(base: Mapping[str, object], override: Mapping[str, object]) -> dict[str, object]:
    """Recursively merge ``override`` into a copy of ``base``."""

    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_deep(current, value)  # pyright: ignore[reportUnknownArgumentType]
        else:
            merged[key] = value
    return merged


class TransactorBase:
    """Base transactor: pending transactions with a target are executable, execution is a no-op.

    Variants override :meth:`execute_transaction` (and optionally tighten
    :meth:`validate_transaction`) and declare the fields they need in their
    definition; building, validating and applying the configuration for those
    fields is handled here.
    """

    def __init__(
        self,
        definition: TransactorDefinition,
        context: TransactorContext,
        configuration: Mapping[str, object] | None = None,
    ) -> None:
        self._definition = definition
        self.context = context
        self._configuration: dict[str, object] = {}
        self.set_configuration(configuration or {})

    @property
    def definition(self) -> TransactorDefinition:
        return self._definition

    @property
    def plugin_id(self) -> str:
        return self._definition.id

    def default_configuration(self) -> dict[str, object]:
        return {}

    @property
    def configuration(self) -> dict[str, object]:
        return dict(self._configuration)

    def set_configuration(self, configuration: Mapping[str, object]) -> None:
        self._configuration = merge_deep(self.default_configuration(), configuration)

    def _t(self, message: str, locale: str | None = None, **args: object) -> str:
        return self.context.translate(message, locale=locale, **args)

    # Transactions --------------------------------------------------------------

    def get_target(self, transaction: Transaction) -> Record | None:
        if transaction.target_id is None:
            return None
        return self.context.repositories.records.get(
            transaction.target_entity_type, transaction.target_id
        )

    def validate_transaction(self, transaction: Transaction) -> bool:
        return (
            transaction.is_pending
            and transaction.target_id is not None
            and self.get_target(transaction) is not None
        )

    def execute_transaction(
        self,
        transaction: Transaction,
        last_executed: Transaction | None = None,
    ) -> bool:
        _ = transaction, last_executed
        return True

    def get_transaction_description(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> str:
        if transaction.is_new:
            if transaction.is_pending:
                return self._t("Unsaved transaction (pending)", locale)
            return self._t("Unsaved transaction", locale)
        if transaction.is_pending:
            return self._t("Transaction {number} (pending)", locale, number=transaction.id)
        return self._t("Transaction {number}", locale, number=transaction.id)

    def get_transaction_details(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> list[str]:
        _ = transaction, locale
        return []

    def get_execution_indications(
        self,
        transaction: Transaction,
        locale: str | None = None,
    ) -> str:
        target = self.get_target(transaction)
        label = target.label if target is not None else f"#{transaction.target_id}"
        return self._t(
            "The target entity {label} may be altered by the transaction.", locale, label=label
        )

    # Configuration -------------------------------------------------------------

    def build_configuration_form(self, transaction_type: TransactionType) -> ConfigurationSchema:
        groups = [
            self._build_transaction_fields_group(transaction_type),
            self._build_target_fields_group(transaction_type),
            self._build_options_group(transaction_type),
        ]
        return ConfigurationSchema(tuple(group for group in groups if group is not None))

    def _build_transaction_fields_group(
        self, transaction_type: TransactionType
    ) -> ConfigurationGroup | None:
        if not self._definition.transaction_fields:
            return None
        bundle_info = self.context.repositories.bundle_info
        settings = transaction_type.plugin_settings
        bindings = tuple(
            self._binding(
                describe_transaction_field(declaration, transaction_type, bundle_info),
                settings.get(declaration.name),
            )
            for declaration in self._definition.transaction_fields
        )
        return ConfigurationGroup(
            key=GroupKey.TRANSACTION_FIELDS,
            title=self._t("Transaction fields"),
            description=self._t("Fields in the transaction entity used by this type of transaction."),
            bindings=bindings,
        )

    def _build_target_fields_group(
        self, transaction_type: TransactionType
    ) -> ConfigurationGroup | None:
        if not self._definition.target_entity_fields:
            return None
        settings = transaction_type.plugin_settings
        bindings = tuple(
            self._binding(
                describe_target_field(declaration, transaction_type),
                settings.get(declaration.name),
            )
            for declaration in self._definition.target_entity_fields
        )
        return ConfigurationGroup(
            key=GroupKey.TARGET_FIELDS,
            title=self._t("Target entity fields"),
            description=self._t("Fields in the target entity used by this type of transaction."),
            bindings=bindings,
        )

    def _build_options_group(self, transaction_type: TransactionType) -> ConfigurationGroup | None:
        options = self.option_definitions(transaction_type)
        if not options:
            return None
        return ConfigurationGroup(
            key=GroupKey.OPTIONS,
            title=self._t("Options"),
            options=options,
        )

    def option_definitions(self, transaction_type: TransactionType) -> tuple[OptionDefinition, ...]:
        """Free-form options of this transactor; none by default."""
        _ = transaction_type
        return ()

    def _binding(self, descriptor: FieldBindingDescriptor, current: object) -> FieldBinding:
        options = find_compatible_fields(
            self.context.repositories.fields,
            descriptor.entity_type,
            descriptor.field_type,
            settings_match=descriptor.settings,
        )
        return FieldBinding(
            descriptor=descriptor,
            current=current if isinstance(current, str) else None,
            options=options,
            can_create=self.context.actor.can_administer_fields(descriptor.entity_type),
            suggested_name=suggest_machine_name(descriptor.title),
            max_name_length=self.context.field_name_max_length - len(self.context.field_prefix),
        )

    def validate_configuration_form(
        self,
        transaction_type: TransactionType,
        schema: ConfigurationSchema,
        submission: ConfigurationSubmission,
    ) -> list[ConfigurationIssue]:
        """Collect every problem of ``submission``; an empty list means it can be applied."""

        _ = transaction_type
        issues: list[ConfigurationIssue] = []
        used: dict[tuple[GroupKey, str], FieldBinding] = {}
        fields = self.context.repositories.fields

        def report(kind: ConfigurationIssueKind, binding: FieldBinding, element: str, message: str) -> None:
            issue = ConfigurationIssue(
                kind=kind, binding=binding.name, element=element, message=message
            )
            if issue not in issues:
                issues.append(issue)

        for group, binding in schema.bindings():
            choice = submission.bindings.get(binding.name)
            descriptor = binding.descriptor
            if choice is None:
                if descriptor.required:
                    report(
                        ConfigurationIssueKind.MISSING_REQUIRED_BINDING,
                        binding,
                        binding.name,
                        self._t("{title} field is required.", title=descriptor.title),
                    )
                continue

            if isinstance(choice, NewField):
                element = binding.new_name_element
                if not binding.can_create:
                    report(
                        ConfigurationIssueKind.FIELD_CREATION_DENIED,
                        binding,
                        element,
                        self._t("You are not allowed to create fields here."),
                    )
                    continue
                if (
                    not _MACHINE_NAME.fullmatch(choice.machine_name)
                    or len(choice.machine_name) > binding.max_name_length
                ):
                    report(
                        ConfigurationIssueKind.INVALID_FIELD_NAME,
                        binding,
                        element,
                        self._t(
                            "The machine-readable name must contain only lowercase letters, "
                            "numbers, and underscores and be at most {length} characters long.",
                            length=binding.max_name_length,
                        ),
                    )
                    continue
                field_name = self.context.field_prefix + choice.machine_name
                if fields.field_exists(descriptor.entity_type, field_name):
                    report(
                        ConfigurationIssueKind.FIELD_NAME_COLLISION,
                        binding,
                        element,
                        self._t("The machine-readable name is already in use. It must be unique."),
                    )
            else:
                element = binding.name
                field_name = choice.field_name
                if field_name not in binding.options:
                    report(
                        ConfigurationIssueKind.INCOMPATIBLE_FIELD,
                        binding,
                        element,
                        self._t(
                            "{field} is not a compatible field for {title}.",
                            field=field_name,
                            title=descriptor.title,
                        ),
                    )
                    continue

            key = (group.key, f"{descriptor.entity_type}.{field_name}")
            first = used.get(key)
            if first is None:
                used[key] = binding
                continue
            message = self._t("A field name can not be used more than once in the same group.")
            first_choice = submission.bindings[first.name]
            first_element = first.new_name_element if isinstance(first_choice, NewField) else first.name
            report(ConfigurationIssueKind.DUPLICATE_FIELD_BINDING, first, first_element, message)
            report(ConfigurationIssueKind.DUPLICATE_FIELD_BINDING, binding, element, message)

        return issues

    def submit_configuration_form(
        self,
        transaction_type: TransactionType,
        schema: ConfigurationSchema,
        submission: ConfigurationSubmission,
    ) -> None:
        """Provision the chosen fields and store the bindings in the type's settings.

        Raises :class:`InvalidConfigurationError` with every issue when
        ``submission`` does not validate; nothing is changed in that case.
        """

        issues = self.validate_configuration_form(transaction_type, schema, submission)
        if issues:
            raise InvalidConfigurationError(issues)

        repositories = self.context.repositories
        provisioner = FieldProvisioner(fields=repositories.fields, displays=repositories.displays)
        settings = transaction_type.plugin_settings

        for _, binding in schema.bindings():
            choice = submission.bindings.get(binding.name)
            if choice is None:
                continue
            descriptor = binding.descriptor
            if isinstance(choice, ExistingField):
                field_name, label = choice.field_name, None
            else:
                field_name = self.context.field_prefix + choice.machine_name
                label = choice.label

            if descriptor.scope is FieldScope.TRANSACTION:
                if not transaction_type.id:
                    raise ValueError("transaction type requires an id before binding its fields")
                bundles: tuple[str, ...] = (transaction_type.id,)
            else:
                bundles = transaction_type.get_bundles(
                    applicable=True, bundle_info=repositories.bundle_info
                )

            settings[binding.name] = provisioner.provision_field(
                descriptor,
                bundles,
                field_name=field_name,
                label=label,
                owner_type_id=transaction_type.id,
            )

        for name in schema.option_names():
            if name in submission.options:
                settings[name] = submission.options[name]

        transaction_type.set_plugin_settings(settings)
        self.set_configuration(settings)
        log.info("Configured transactor %s for type %s", self.plugin_id, transaction_type.id)
