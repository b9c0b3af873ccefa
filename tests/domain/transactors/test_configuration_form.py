from __future__ import annotations

import pytest

from tests.helpers.transactions import (
    FIELD_ADMIN,
    add_bundles,
    add_field,
    make_context,
    make_repositories,
)
from transactor.domain.errors import InvalidConfigurationError
from transactor.domain.fields import FieldDeclaration
from transactor.domain.model import (
    ANONYMOUS,
    REFERENCE_FIELD_TYPE,
    DisplayContext,
    TransactionType,
    new_transaction_type,
)
from transactor.domain.ports import TransactionRepositories
from transactor.domain.transactors import (
    GENERIC_DEFINITION,
    ConfigurationIssueKind,
    ConfigurationSubmission,
    ExistingField,
    GenericTransactor,
    GroupKey,
    NewField,
    OptionDefinition,
    TransactorBase,
    TransactorDefinition,
)

NOTES_DEFINITION = TransactorDefinition(
    id="notes",
    title="Notes",
    target_entity_fields=(
        FieldDeclaration(name="first_note", field_type="string", title="First note"),
        FieldDeclaration(name="second_note", field_type="string", title="Second note"),
    ),
    transaction_fields=(
        FieldDeclaration(name="reason", field_type="string", title="Reason", required=True),
    ),
)


class NotesTransactor(TransactorBase):
    def option_definitions(self, transaction_type: TransactionType) -> tuple[OptionDefinition, ...]:
        _ = transaction_type
        return (OptionDefinition(name="auto_execute", title="Execute on save"),)


def _restock_type(repositories: TransactionRepositories, plugin_id: str = "generic") -> TransactionType:
    add_bundles(repositories, "inventory_item", ["tools", "bolts"])
    transaction_type = new_transaction_type(
        id="restock",
        label="Restock",
        target_entity_type="inventory_item",
        transactor_id=plugin_id,
    )
    repositories.transaction_types.add(transaction_type)
    return transaction_type


def test_generic_form_offers_transaction_and_target_groups() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    add_field(
        repositories,
        "inventory_item",
        "field_last_restock",
        REFERENCE_FIELD_TYPE,
        bundles=["tools"],
        label="Last restock",
        settings={"target_type": "transaction"},
    )
    add_field(
        repositories,
        "inventory_item",
        "field_owner",
        REFERENCE_FIELD_TYPE,
        settings={"target_type": "user"},
    )
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories))

    schema = transactor.build_configuration_form(transaction_type)

    assert [group.key for group in schema.groups] == [
        GroupKey.TRANSACTION_FIELDS,
        GroupKey.TARGET_FIELDS,
    ]
    log_message = schema.binding("log_message")
    assert log_message is not None
    assert log_message.descriptor.entity_type == "transaction"
    assert log_message.can_create
    assert log_message.suggested_name == "log_message"
    assert log_message.max_name_length == 26
    last_transaction = schema.binding("last_transaction")
    assert last_transaction is not None
    assert dict(last_transaction.options) == {
        "field_last_restock": "Last restock (field_last_restock)"
    }
    assert last_transaction.current is None


def test_form_hides_field_creation_without_permission() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories, actor=ANONYMOUS))

    schema = transactor.build_configuration_form(transaction_type)

    assert all(not binding.can_create for _, binding in schema.bindings())


def test_submit_creates_new_fields_and_stores_bindings() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)
    submission = ConfigurationSubmission(
        bindings={
            "log_message": NewField("restock_note", label="Restock note"),
            "last_transaction": NewField("last_restock"),
        }
    )

    transactor.submit_configuration_form(transaction_type, schema, submission)

    assert transaction_type.plugin_settings == {
        "log_message": "field_restock_note",
        "last_transaction": "field_last_restock",
    }
    assert transactor.configuration == transaction_type.plugin_settings

    note = repositories.fields.load_field("transaction", "restock", "field_restock_note")
    assert note is not None
    assert note.label == "Restock note"

    for bundle in ("tools", "bolts"):
        attachment = repositories.fields.load_field("inventory_item", bundle, "field_last_restock")
        assert attachment is not None
        assert attachment.handler_settings == {"target_bundles": ["restock"]}
        form = repositories.displays.load_or_create("inventory_item", bundle, DisplayContext.FORM)
        assert form.is_field_enabled("field_last_restock")


def test_submit_attaches_existing_field_to_missing_bundles() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    add_field(
        repositories,
        "inventory_item",
        "field_last_restock",
        REFERENCE_FIELD_TYPE,
        settings={"target_type": "transaction"},
        bundles=["tools"],
    )
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    transactor.submit_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(bindings={"last_transaction": ExistingField("field_last_restock")}),
    )

    assert transaction_type.plugin_settings == {"last_transaction": "field_last_restock"}
    assert repositories.fields.load_field("inventory_item", "bolts", "field_last_restock")
    assert len(repositories.fields.storages) == 1


def test_new_field_name_collision_is_reported() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    add_field(repositories, "inventory_item", "field_last_restock", "string")
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(bindings={"last_transaction": NewField("last_restock")}),
    )

    assert [(issue.kind, issue.element) for issue in issues] == [
        (ConfigurationIssueKind.FIELD_NAME_COLLISION, "last_transaction_field_name")
    ]
    assert issues[0].message == "The machine-readable name is already in use. It must be unique."


def test_new_field_requires_permission() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories, actor=ANONYMOUS))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(bindings={"log_message": NewField("note")}),
    )

    assert [issue.kind for issue in issues] == [ConfigurationIssueKind.FIELD_CREATION_DENIED]


@pytest.mark.parametrize("machine_name", ["Bad-Name", "", "x" * 27])
def test_invalid_machine_names_are_reported(machine_name: str) -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(bindings={"log_message": NewField(machine_name)}),
    )

    assert [issue.kind for issue in issues] == [ConfigurationIssueKind.INVALID_FIELD_NAME]


def test_existing_field_must_be_compatible() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories)
    add_field(repositories, "inventory_item", "field_count", "integer", bundles=["tools"])
    transactor = GenericTransactor(GENERIC_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(bindings={"last_transaction": ExistingField("field_count")}),
    )

    assert [(issue.kind, issue.binding) for issue in issues] == [
        (ConfigurationIssueKind.INCOMPATIBLE_FIELD, "last_transaction")
    ]


def test_duplicate_existing_field_in_one_group_reports_both_bindings() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories, plugin_id="notes")
    add_field(repositories, "inventory_item", "field_note", "string", bundles=["tools", "bolts"])
    add_field(repositories, "transaction", "field_reason", "string", bundles=["restock"])
    transactor = NotesTransactor(NOTES_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)
    submission = ConfigurationSubmission(
        bindings={
            "reason": ExistingField("field_reason"),
            "first_note": ExistingField("field_note"),
            "second_note": ExistingField("field_note"),
        }
    )

    issues = transactor.validate_configuration_form(transaction_type, schema, submission)

    assert [(issue.kind, issue.element) for issue in issues] == [
        (ConfigurationIssueKind.DUPLICATE_FIELD_BINDING, "first_note"),
        (ConfigurationIssueKind.DUPLICATE_FIELD_BINDING, "second_note"),
    ]
    with pytest.raises(InvalidConfigurationError) as excinfo:
        transactor.submit_configuration_form(transaction_type, schema, submission)
    assert len(excinfo.value.issues) == 2
    assert transaction_type.plugin_settings == {}


def test_duplicate_new_field_names_report_name_elements() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories, plugin_id="notes")
    transactor = NotesTransactor(NOTES_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(
            bindings={
                "reason": NewField("reason"),
                "first_note": NewField("note"),
                "second_note": NewField("note"),
            }
        ),
    )

    assert [issue.element for issue in issues] == [
        "first_note_field_name",
        "second_note_field_name",
    ]
    assert repositories.fields.storages == []


def test_same_field_in_different_groups_is_allowed() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories, plugin_id="notes")
    transactor = NotesTransactor(NOTES_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(
            bindings={"reason": NewField("note"), "first_note": NewField("note")}
        ),
    )

    assert issues == []


def test_missing_required_binding_is_reported() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories, plugin_id="notes")
    transactor = NotesTransactor(NOTES_DEFINITION, make_context(repositories))
    schema = transactor.build_configuration_form(transaction_type)

    issues = transactor.validate_configuration_form(
        transaction_type, schema, ConfigurationSubmission()
    )

    assert [(issue.kind, issue.binding) for issue in issues] == [
        (ConfigurationIssueKind.MISSING_REQUIRED_BINDING, "reason")
    ]


def test_options_are_stored_with_bindings() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories, plugin_id="notes")
    transactor = NotesTransactor(NOTES_DEFINITION, make_context(repositories, actor=FIELD_ADMIN))
    schema = transactor.build_configuration_form(transaction_type)
    assert schema.option_names() == ("auto_execute",)

    transactor.submit_configuration_form(
        transaction_type,
        schema,
        ConfigurationSubmission(
            bindings={"reason": NewField("reason")},
            options={"auto_execute": True, "unknown": "ignored"},
        ),
    )

    assert transaction_type.plugin_settings == {"reason": "field_reason", "auto_execute": True}


def test_submitted_false_option_overrides_stored_value() -> None:
    repositories = make_repositories()
    transaction_type = _restock_type(repositories, plugin_id="notes")
    transactor = NotesTransactor(NOTES_DEFINITION, make_context(repositories, actor=FIELD_ADMIN))
    transactor.submit_configuration_form(
        transaction_type,
        transactor.build_configuration_form(transaction_type),
        ConfigurationSubmission(
            bindings={"reason": NewField("reason")},
            options={"auto_execute": True},
        ),
    )

    transactor.submit_configuration_form(
        transaction_type,
        transactor.build_configuration_form(transaction_type),
        ConfigurationSubmission(
            bindings={"reason": ExistingField("field_reason")},
            options={"auto_execute": False},
        ),
    )
    assert transaction_type.plugin_settings["auto_execute"] is False

    transactor.submit_configuration_form(
        transaction_type,
        transactor.build_configuration_form(transaction_type),
        ConfigurationSubmission(bindings={"reason": ExistingField("field_reason")}),
    )
    assert transaction_type.plugin_settings["auto_execute"] is False


def test_configuration_merges_over_defaults() -> None:
    class _Defaults(TransactorBase):
        def default_configuration(self) -> dict[str, object]:
            return {"limits": {"max": 10, "min": 1}, "label": "default"}

    transactor = _Defaults(
        NOTES_DEFINITION,
        make_context(),
        {"limits": {"max": 20}},
    )

    assert transactor.configuration == {"limits": {"max": 20, "min": 1}, "label": "default"}
