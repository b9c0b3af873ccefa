"""Ports for the field schema: bundles, field storages/attachments and displays."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from transactor.domain.model import Display, DisplayContext, FieldAttachment, FieldStorage


@runtime_checkable
class BundleInfo(Protocol):
    """Answers which bundles exist for a record type."""

    def list_bundles(self, record_type: str) -> set[str]: ...


@runtime_checkable
class FieldSchemaRepository(Protocol):
    """Field storages (one per record type and name) and their per-bundle attachments."""

    def field_exists(self, record_type: str, field_name: str) -> bool: ...

    def get_storage(self, record_type: str, field_name: str) -> FieldStorage | None: ...

    def storages_of_type(self, record_type: str, field_type: str) -> Sequence[FieldStorage]:
        """Return storages of ``field_type`` in the order they were created."""
        ...

    def add_storage(self, storage: FieldStorage) -> None: ...

    def load_field(self, record_type: str, bundle: str, field_name: str) -> FieldAttachment | None:
        """Return the attachment of ``field_name`` to ``bundle``, if any."""
        ...

    def attachments_of(self, record_type: str, field_name: str) -> Sequence[FieldAttachment]: ...

    def add_attachment(self, attachment: FieldAttachment) -> None: ...


@runtime_checkable
class DisplayRepository(Protocol):
    """Presentation configuration per (record type, bundle, context, mode)."""

    def load_or_create(
        self,
        record_type: str,
        bundle: str,
        context: DisplayContext,
        mode: str = ...,
    ) -> Display: ...

    def save(self, display: Display) -> None: ...
