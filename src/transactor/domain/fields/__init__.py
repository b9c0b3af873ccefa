"""Field resolution and provisioning for transactor bindings."""

from __future__ import annotations

from .descriptors import FieldBindingDescriptor, FieldDeclaration, FieldScope
from .provisioner import FieldProvisioner
from .resolver import (
    describe_target_field,
    describe_transaction_field,
    find_compatible_fields,
    resolve_target_bundles,
    suggest_machine_name,
)

__all__ = [
    "FieldBindingDescriptor",
    "FieldDeclaration",
    "FieldProvisioner",
    "FieldScope",
    "describe_target_field",
    "describe_transaction_field",
    "find_compatible_fields",
    "resolve_target_bundles",
    "suggest_machine_name",
]
