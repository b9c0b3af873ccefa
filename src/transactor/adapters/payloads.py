"""Pydantic models describing operator-supplied configuration documents.

A configuration document binds each declared field of a transactor either to
an existing field or to a field to be created, and sets free-form options::

    {
        "bindings": {
            "log_message": {"new": "restock_note", "label": "Restock note"},
            "last_transaction": "field_last_restock"
        },
        "options": {}
    }

A bare string is shorthand for ``{"existing": "<field name>"}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, model_validator

from transactor.domain.transactors import (
    ConfigurationSubmission,
    ExistingField,
    FieldChoice,
    NewField,
)


class PayloadBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class BindingPayload(PayloadBaseModel):
    existing: str | None = None
    new: str | None = None
    label: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: object) -> object:
        if isinstance(value, str):
            return {"existing": value}
        return value

    @model_validator(mode="after")
    def _require_one_choice(self) -> BindingPayload:
        if (self.existing is None) == (self.new is None):
            raise ValueError("binding must set exactly one of 'existing' or 'new'")
        if self.label is not None and self.new is None:
            raise ValueError("'label' only applies to new fields")
        return self

    def to_choice(self) -> FieldChoice:
        if self.new is not None:
            return NewField(machine_name=self.new, label=self.label)
        return ExistingField(field_name=cast(str, self.existing))


class ConfigurationPayload(PayloadBaseModel):
    bindings: dict[str, BindingPayload] = Field(default_factory=dict[str, BindingPayload])
    options: dict[str, object] = Field(default_factory=dict[str, object])

    def to_submission(self) -> ConfigurationSubmission:
        return ConfigurationSubmission(
            bindings={name: binding.to_choice() for name, binding in self.bindings.items()},
            options=dict(self.options),
        )


def parse_configuration(payload: Mapping[str, object] | str | bytes) -> ConfigurationSubmission:
    """Validate a configuration document (parsed or raw JSON) into a submission."""

    if isinstance(payload, str | bytes):
        return ConfigurationPayload.model_validate_json(payload).to_submission()
    return ConfigurationPayload.model_validate(payload).to_submission()
