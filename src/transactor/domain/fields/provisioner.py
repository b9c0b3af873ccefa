"""Create field storages, bundle attachments and display entries on demand."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from transactor.domain.model import DisplayContext, FieldAttachment, FieldStorage

from .resolver import resolve_target_bundles

if TYPE_CHECKING:
    from collections.abc import Iterable

    from transactor.domain.ports import DisplayRepository, FieldSchemaRepository

    from .descriptors import FieldBindingDescriptor

log = logging.getLogger(__name__)

DEFAULT_COMPONENT_OPTIONS: dict[str, object] = {"weight": 0}


@dataclass(slots=True)
class FieldProvisioner:
    """Makes a field satisfying a descriptor available on a set of bundles.

    Re-provisioning is a no-op for whatever already exists: the storage is
    created once and bundles that carry the field are skipped. Callers must
    serialise provisioning per (record type, field name).
    """

    fields: FieldSchemaRepository
    displays: DisplayRepository

    def provision_field(
        self,
        descriptor: FieldBindingDescriptor,
        bundles: Iterable[str],
        *,
        field_name: str,
        label: str | None = None,
        owner_type_id: str | None = None,
    ) -> str:
        """Ensure ``field_name`` exists for ``descriptor`` and is attached to ``bundles``."""

        record_type = descriptor.entity_type
        storage = self.fields.get_storage(record_type, field_name)
        if storage is None:
            storage = FieldStorage(
                record_type=record_type,
                field_name=field_name,
                field_type=descriptor.field_type,
                settings=dict(descriptor.settings),
            )
            self.fields.add_storage(storage)
            log.info("Created field storage %s (%s)", storage.field_id, storage.field_type)
        elif storage.field_type != descriptor.field_type:
            raise ValueError(
                f"field {storage.field_id} is of type {storage.field_type}, "
                f"expected {descriptor.field_type}"
            )

        handler_settings: dict[str, object] = {}
        if descriptor.target_bundles is not None:
            handler_settings["target_bundles"] = resolve_target_bundles(
                descriptor.target_bundles, owner_type_id
            )

        for bundle in dict.fromkeys(bundles):
            if self.fields.load_field(record_type, bundle, field_name) is not None:
                continue
            attachment = FieldAttachment(
                record_type=record_type,
                bundle=bundle,
                field_name=field_name,
                label=label or descriptor.title,
                required=descriptor.required,
                handler_settings=dict(handler_settings),
            )
            self.fields.add_attachment(attachment)
            log.info("Attached field %s to bundle %s", field_name, bundle)
            self._enable_in_displays(record_type, bundle, field_name)

        return field_name

    def _enable_in_displays(self, record_type: str, bundle: str, field_name: str) -> None:
        for context in (DisplayContext.FORM, DisplayContext.VIEW):
            display = self.displays.load_or_create(record_type, bundle, context)
            display.enable_field(field_name, DEFAULT_COMPONENT_OPTIONS)
            self.displays.save(display)
