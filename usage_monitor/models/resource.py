# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Inventory record data models."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import ResourceCategory, TagState

HOURS_PER_MONTH = 24 * 30


class BillingTag(BaseModel):
    """Three-valued billing tag: present (possibly empty), absent or unresolvable.

    "Unresolvable" means the tag could not be observed, typically because the
    tag lookup was denied. It is distinct from "absent" so that policy rules
    can exempt it instead of reporting a missing tag.
    """

    model_config = ConfigDict(frozen=True)

    state: TagState = Field(..., description="Observed tag state")
    value: str | None = Field(None, description="Tag value when present (may be empty)")

    @model_validator(mode="after")
    def check_value_matches_state(self) -> "BillingTag":
        if self.state == TagState.PRESENT and self.value is None:
            raise ValueError("a present billing tag needs a value")
        if self.state != TagState.PRESENT and self.value is not None:
            raise ValueError(f"a {self.state.value} billing tag cannot carry a value")
        return self

    @classmethod
    def present(cls, value: str) -> "BillingTag":
        return cls(state=TagState.PRESENT, value=value)

    @classmethod
    def absent(cls) -> "BillingTag":
        return cls(state=TagState.ABSENT)

    @classmethod
    def unresolvable(cls) -> "BillingTag":
        return cls(state=TagState.UNRESOLVABLE)

    @property
    def is_present(self) -> bool:
        return self.state == TagState.PRESENT

    @property
    def is_unresolvable(self) -> bool:
        return self.state == TagState.UNRESOLVABLE

    def display(self) -> str:
        """Value for reports; anything but a present tag renders empty."""
        return self.value if self.value is not None else ""


class ResourceRecord(BaseModel):
    """A single inventoried resource, normalized across resource families."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "category": "volume",
                "identifier": "vol-0123456789abcdef0",
                "region": "us-east-1",
                "created_at": "2023-04-01T09:00:00Z",
                "name": "build-cache",
                "billing_tag": {"state": "present", "value": "team-a"},
                "size_or_capacity": 100,
                "related_identifiers": ["i-0123456789abcdef0"],
                "related_names": ["build-runner"],
            }
        },
    )

    category: ResourceCategory = Field(..., description="Resource category")
    identifier: str = Field(..., description="Identifier, unique within region and category")
    region: str = Field(..., description="AWS region the resource lives in")
    created_at: datetime = Field(..., description="Creation or launch time")
    name: str | None = Field(None, description="Name tag or provider name")
    billing_tag: BillingTag = Field(
        default_factory=BillingTag.absent, description="Billing tag state"
    )
    size_or_capacity: float | None = Field(
        None, description="Size or capacity; unit depends on the category"
    )
    cost_rate_per_hour: float | None = Field(
        None, ge=0.0, description="Hourly cost from a static price table"
    )
    related_identifiers: list[str] = Field(
        default_factory=list, description="Identifiers of related resources"
    )
    related_names: list[str] = Field(
        default_factory=list, description="Names of the related resources, same order"
    )
    type_label: str | None = Field(None, description="Instance type, class or launch type")
    details: dict[str, Any] = Field(
        default_factory=dict, description="Family-specific report fields"
    )

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Naive timestamps are read as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def record_key(self) -> tuple[str, str, str]:
        return (self.category.value, self.region, self.identifier)

    @property
    def display_name(self) -> str:
        return self.name if self.name else self.identifier

    @property
    def cost_per_month(self) -> float | None:
        """Monthly estimate as hourly rate x 24 x 30."""
        if self.cost_rate_per_hour is None:
            return None
        return self.cost_rate_per_hour * HOURS_PER_MONTH
