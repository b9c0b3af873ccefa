"""Identity of whoever drives configuration and execution."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Actor:
    """Current actor as seen by transactors.

    Permission checks are answered from the granted set only; resolving roles
    into permissions is the caller's business.
    """

    name: str
    permissions: frozenset[str] = field(default_factory=frozenset[str])

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def can_administer_fields(self, record_type: str) -> bool:
        return self.has_permission(f"administer {record_type} fields")


ANONYMOUS = Actor(name="anonymous")
