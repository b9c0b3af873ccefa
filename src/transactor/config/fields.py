"""Field creation settings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from transactor.domain.model import Actor

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_FIELD_PREFIX: Final[str] = "field_"
FIELD_NAME_MAX_LENGTH: Final[int] = 32

_PREFIX_PATTERN = re.compile(r"[a-z0-9_]*")


@dataclass(frozen=True, slots=True)
class FieldConfig:
    """Prefix and length limits applied to newly created field machine names."""

    prefix: str = DEFAULT_FIELD_PREFIX
    name_max_length: int = FIELD_NAME_MAX_LENGTH

    def __post_init__(self) -> None:
        if not _PREFIX_PATTERN.fullmatch(self.prefix):
            raise ConfigurationError(f"Invalid field prefix: {self.prefix!r}")
        if len(self.prefix) >= self.name_max_length:
            raise ConfigurationError(
                f"Field prefix {self.prefix!r} leaves no room for a field name"
            )

    @property
    def machine_name_max_length(self) -> int:
        """Characters available for the operator-chosen part of a field name."""
        return self.name_max_length - len(self.prefix)


def get_field_config() -> FieldConfig:
    return FieldConfig(prefix=optional_env_var("TRANSACTOR_FIELD_PREFIX", DEFAULT_FIELD_PREFIX))


@dataclass(frozen=True, slots=True)
class ActorConfig:
    """Identity and granted permissions of the operator driving the CLI."""

    name: str
    permissions: frozenset[str] = frozenset()

    def to_actor(self) -> Actor:
        return Actor(name=self.name, permissions=self.permissions)


def _parse_permissions(raw: str) -> frozenset[str]:
    return frozenset(" ".join(item.split()) for item in raw.split(",") if item.strip())


def get_actor_config() -> ActorConfig:
    return ActorConfig(
        name=optional_env_var("TRANSACTOR_ACTOR", "cli"),
        permissions=_parse_permissions(optional_env_var("TRANSACTOR_ACTOR_PERMISSIONS", "")),
    )
