"""Generic target records and their bundles."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False, kw_only=True)
class Bundle:
    """Named sub-type of a record type."""

    record_type: str
    name: str
    label: str | None = None


@dataclass(eq=False, kw_only=True)
class Record:
    """A record transactions act upon.

    Field values are keyed by field name; which names are valid for the
    record's bundle is decided by the field schema, not by the record.
    """

    record_type: str
    bundle: str
    label: str
    id: int | None = None
    field_values: dict[str, object] = field(default_factory=dict[str, object])

    @property
    def is_new(self) -> bool:
        return self.id is None

    def get_field(self, name: str, default: object = None) -> object:
        return self.field_values.get(name, default)

    def set_field(self, name: str, value: object) -> None:
        self.field_values[name] = value
