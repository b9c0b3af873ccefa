"""Field schema building blocks: storages, per-bundle attachments, displays."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import DEFAULT_DISPLAY_MODE, DisplayContext


@dataclass(eq=False, kw_only=True)
class FieldStorage:
    """A field defined once per record type, shared by every bundle it is attached to."""

    record_type: str
    field_name: str
    field_type: str
    settings: dict[str, object] = field(default_factory=dict[str, object])

    @property
    def field_id(self) -> str:
        return f"{self.record_type}.{self.field_name}"

    def get_setting(self, key: str, default: object = None) -> object:
        return self.settings.get(key, default)


@dataclass(eq=False, kw_only=True)
class FieldAttachment:
    """Per-bundle configuration of a field storage."""

    record_type: str
    bundle: str
    field_name: str
    label: str
    required: bool = False
    handler_settings: dict[str, object] = field(default_factory=dict[str, object])

    @property
    def field_id(self) -> str:
        return f"{self.record_type}.{self.bundle}.{self.field_name}"


@dataclass(eq=False, kw_only=True)
class Display:
    """Form or view presentation of one bundle in one mode."""

    record_type: str
    bundle: str
    context: DisplayContext
    mode: str = DEFAULT_DISPLAY_MODE
    enabled: bool = True
    components: dict[str, dict[str, object]] = field(
        default_factory=dict[str, dict[str, object]]
    )

    def enable_field(self, name: str, options: dict[str, object] | None = None) -> None:
        self.components[name] = dict(options or {"weight": 0})

    def is_field_enabled(self, name: str) -> bool:
        return name in self.components
