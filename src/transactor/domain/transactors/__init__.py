"""Transactor plugins: contract, shared base, variants and registry."""

from __future__ import annotations

from .base import TransactorBase, merge_deep
from .configuration import (
    ConfigurationGroup,
    ConfigurationIssue,
    ConfigurationIssueKind,
    ConfigurationSchema,
    ConfigurationSubmission,
    ExistingField,
    FieldBinding,
    FieldChoice,
    GroupKey,
    NewField,
    OptionDefinition,
)
from .contract import TransactorContext, TransactorDefinition, TransactorPlugin
from .generic import GENERIC_DEFINITION, GENERIC_TRANSACTOR_ID, GenericTransactor
from .registry import TransactorFactory, TransactorRegistry, default_registry

__all__ = [
    "GENERIC_DEFINITION",
    "GENERIC_TRANSACTOR_ID",
    "ConfigurationGroup",
    "ConfigurationIssue",
    "ConfigurationIssueKind",
    "ConfigurationSchema",
    "ConfigurationSubmission",
    "ExistingField",
    "FieldBinding",
    "FieldChoice",
    "GenericTransactor",
    "GroupKey",
    "NewField",
    "OptionDefinition",
    "TransactorBase",
    "TransactorContext",
    "TransactorDefinition",
    "TransactorFactory",
    "TransactorPlugin",
    "TransactorRegistry",
    "default_registry",
    "merge_deep",
]
