"""Field declarations made by transactors and the bindings resolved from them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


def _frozen(mapping: Mapping[str, object] | None) -> Mapping[str, object]:
    return MappingProxyType(dict(mapping or {}))


class FieldScope(StrEnum):
    """Which record a field lives on."""

    TRANSACTION = "transaction"
    TARGET = "target"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDeclaration:
    """Static requirement of a transactor for a field, before any type is known.

    A reference field without ``target_type`` in its settings gets one inferred
    when the declaration is bound to a transaction type.
    """

    name: str
    field_type: str
    title: str
    description: str = ""
    required: bool = False
    settings: Mapping[str, object] = field(default_factory=lambda: _frozen(None))

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", _frozen(self.settings))


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldBindingDescriptor:
    """A declaration bound to a concrete record type.

    ``target_bundles`` is only set for reference fields; a ``None`` entry stands
    for the owning transaction type and is resolved on provisioning.
    """

    name: str
    title: str
    entity_type: str
    field_type: str
    scope: FieldScope
    description: str = ""
    required: bool = False
    settings: Mapping[str, object] = field(default_factory=lambda: _frozen(None))
    target_bundles: tuple[str | None, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", _frozen(self.settings))
