"""Discover existing fields compatible with a binding descriptor."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from transactor.domain.model import REFERENCE_FIELD_TYPE, TRANSACTION_RECORD_TYPE

from .descriptors import FieldBindingDescriptor, FieldScope

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from transactor.domain.model import TransactionType
    from transactor.domain.ports import BundleInfo, FieldSchemaRepository

    from .descriptors import FieldDeclaration

_MACHINE_NAME_INVALID = re.compile(r"[^a-z0-9_]+")


def find_compatible_fields(
    schema: FieldSchemaRepository,
    record_type: str,
    field_type: str,
    bundles: str | Iterable[str] = (),
    settings_match: Mapping[str, object] | None = None,
) -> dict[str, str]:
    """Return ``{field_name: label}`` for fields of ``field_type`` on ``record_type``.

    A field qualifies only if it is attached to every bundle in ``bundles`` and its
    storage settings equal every key/value in ``settings_match``. Results keep the
    order in which the storages were created.
    """

    required_bundles = {bundles} if isinstance(bundles, str) else set(bundles)
    options: dict[str, str] = {}
    for storage in schema.storages_of_type(record_type, field_type):
        attachments = list(schema.attachments_of(record_type, storage.field_name))
        attached_to = {attachment.bundle for attachment in attachments}
        if not required_bundles <= attached_to:
            continue
        if any(
            storage.get_setting(key) != value for key, value in (settings_match or {}).items()
        ):
            continue
        options[storage.field_name] = (
            f"{attachments[-1].label} ({storage.field_name})" if attachments else storage.field_name
        )
    return options


def describe_transaction_field(
    declaration: FieldDeclaration,
    transaction_type: TransactionType,
    bundle_info: BundleInfo,
) -> FieldBindingDescriptor:
    """Bind a declaration to the transaction record of ``transaction_type``.

    Untargeted reference fields point at the target record type, limited to the
    type's applicable bundles.
    """

    settings = dict(declaration.settings)
    target_bundles: tuple[str | None, ...] | None = None
    if declaration.field_type == REFERENCE_FIELD_TYPE and "target_type" not in settings:
        settings["target_type"] = transaction_type.target_entity_type
        target_bundles = transaction_type.get_bundles(applicable=True, bundle_info=bundle_info)
    return _descriptor(
        declaration,
        entity_type=TRANSACTION_RECORD_TYPE,
        scope=FieldScope.TRANSACTION,
        settings=settings,
        target_bundles=target_bundles,
    )


def describe_target_field(
    declaration: FieldDeclaration,
    transaction_type: TransactionType,
) -> FieldBindingDescriptor:
    """Bind a declaration to the target record type of ``transaction_type``.

    Untargeted reference fields point back at transactions of this very type.
    The type may not have an id yet; the ``None`` placeholder left in that case
    is filled in by :func:`resolve_target_bundles`.
    """

    settings = dict(declaration.settings)
    target_bundles: tuple[str | None, ...] | None = None
    if declaration.field_type == REFERENCE_FIELD_TYPE and "target_type" not in settings:
        settings["target_type"] = TRANSACTION_RECORD_TYPE
        target_bundles = (transaction_type.id,)
    return _descriptor(
        declaration,
        entity_type=transaction_type.target_entity_type,
        scope=FieldScope.TARGET,
        settings=settings,
        target_bundles=target_bundles,
    )


def resolve_target_bundles(
    target_bundles: Iterable[str | None],
    owner_type_id: str | None,
) -> list[str]:
    """Replace ``None`` placeholders by the owning transaction type id."""

    resolved: list[str] = []
    for bundle in target_bundles:
        value = owner_type_id if bundle is None else bundle
        if value is None:
            raise ValueError("owning transaction type id required to resolve target bundles")
        resolved.append(value)
    return resolved


def suggest_machine_name(title: str) -> str:
    """Derive a default machine name from a human title."""

    return _MACHINE_NAME_INVALID.sub("_", title.lower())


def _descriptor(
    declaration: FieldDeclaration,
    *,
    entity_type: str,
    scope: FieldScope,
    settings: dict[str, object],
    target_bundles: tuple[str | None, ...] | None,
) -> FieldBindingDescriptor:
    return FieldBindingDescriptor(
        name=declaration.name,
        title=declaration.title,
        description=declaration.description,
        required=declaration.required,
        entity_type=entity_type,
        field_type=declaration.field_type,
        scope=scope,
        settings=settings,
        target_bundles=target_bundles,
    )
