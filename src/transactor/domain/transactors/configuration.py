"""Declarative configuration schema of a transactor and operator submissions.

The schema is a plain value: groups of field bindings, each carrying its
descriptor and the choices an operator has. Rendering it is left to whichever
presentation layer consumes it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterator

    from transactor.domain.fields import FieldBindingDescriptor


class GroupKey(StrEnum):
    TRANSACTION_FIELDS = "transaction_fields"
    TARGET_FIELDS = "target_fields"
    OPTIONS = "options"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldBinding:
    """One field requirement together with the operator's choices for it."""

    descriptor: FieldBindingDescriptor
    current: str | None
    options: Mapping[str, str]
    can_create: bool
    suggested_name: str
    max_name_length: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def new_name_element(self) -> str:
        """Element key for the machine name of a field created for this binding."""
        return f"{self.descriptor.name}_field_name"


@dataclass(frozen=True, slots=True, kw_only=True)
class OptionDefinition:
    """A free-form transactor option stored alongside field bindings."""

    name: str
    title: str
    description: str = ""
    default: object = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfigurationGroup:
    key: GroupKey
    title: str
    description: str = ""
    bindings: tuple[FieldBinding, ...] = ()
    options: tuple[OptionDefinition, ...] = ()


@dataclass(frozen=True, slots=True)
class ConfigurationSchema:
    groups: tuple[ConfigurationGroup, ...] = ()

    def group(self, key: GroupKey) -> ConfigurationGroup | None:
        return next((group for group in self.groups if group.key == key), None)

    def bindings(self) -> Iterator[tuple[ConfigurationGroup, FieldBinding]]:
        for group in self.groups:
            for binding in group.bindings:
                yield group, binding

    def binding(self, name: str) -> FieldBinding | None:
        return next((binding for _, binding in self.bindings() if binding.name == name), None)

    def option_names(self) -> tuple[str, ...]:
        return tuple(option.name for group in self.groups for option in group.options)


# Submissions -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExistingField:
    """Bind to a field that already exists."""

    field_name: str
    kind: Literal["existing"] = "existing"


@dataclass(frozen=True, slots=True)
class NewField:
    """Create a field; ``machine_name`` excludes the configured prefix."""

    machine_name: str
    label: str | None = None
    kind: Literal["new"] = "new"


type FieldChoice = ExistingField | NewField


@dataclass(frozen=True, slots=True)
class ConfigurationSubmission:
    bindings: Mapping[str, FieldChoice] = field(default_factory=dict[str, "FieldChoice"])
    options: Mapping[str, object] = field(default_factory=dict[str, object])


# Issues ------------------------------------------------------------------------


class ConfigurationIssueKind(StrEnum):
    FIELD_NAME_COLLISION = "field_name_collision"
    DUPLICATE_FIELD_BINDING = "duplicate_field_binding"
    INVALID_FIELD_NAME = "invalid_field_name"
    INCOMPATIBLE_FIELD = "incompatible_field"
    FIELD_CREATION_DENIED = "field_creation_denied"
    MISSING_REQUIRED_BINDING = "missing_required_binding"


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfigurationIssue:
    """A problem tied to one element of a submitted configuration."""

    kind: ConfigurationIssueKind
    binding: str
    element: str
    message: str
