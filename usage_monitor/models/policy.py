# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Policy rule data models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import AgeUnit, ResourceCategory, RuleKind
from .resource import ResourceRecord


class AgeThreshold(BaseModel):
    """Minimum age in whole calendar units."""

    model_config = ConfigDict(frozen=True)

    amount: int = Field(..., ge=0, description="Number of whole units")
    unit: AgeUnit = Field(AgeUnit.DAYS, description="Calendar unit")

    def describe(self) -> str:
        unit = self.unit.value if self.amount != 1 else self.unit.value.rstrip("s")
        return f"{self.amount} {unit}"


class RuleScope(BaseModel):
    """Which records a rule applies to."""

    model_config = ConfigDict(frozen=True)

    categories: frozenset[ResourceCategory] | None = Field(
        None, description="Categories in scope. None means every category."
    )
    type_labels: frozenset[str] | None = Field(
        None, description="Type labels in scope (e.g. FARGATE). None means any type."
    )
    unattached_only: bool = Field(
        False, description="Only records without related identifiers are in scope"
    )

    def matches(self, record: ResourceRecord) -> bool:
        if self.categories and record.category not in self.categories:
            return False
        if self.type_labels and record.type_label not in self.type_labels:
            return False
        if self.unattached_only and record.related_identifiers:
            return False
        return True


class PolicyRule(BaseModel):
    """Declarative policy rule evaluated against the merged inventory."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "rule_id": "ebs-aged-volumes",
                "kind": "age_threshold",
                "title": "Old EBS volumes (over 2 years) found!",
                "applies_to": {"categories": ["volume"]},
                "min_age": {"amount": 2, "unit": "years"},
                "whitelist": ["shared-datasets"],
            }
        },
    )

    rule_id: str = Field(..., min_length=1, description="Unique rule identifier")
    kind: RuleKind = Field(..., description="Kind of rule")
    title: str = Field(..., description="Heading of the alert digest for this rule")
    applies_to: RuleScope = Field(default_factory=RuleScope, description="Rule scope")
    min_age: AgeThreshold | None = Field(None, description="Age threshold")
    min_hourly_rate: float | None = Field(
        None, ge=0.0, description="Minimum hourly cost rate (cost-duration rules)"
    )
    whitelist: frozenset[str] = Field(
        default_factory=frozenset, description="Names exempt from age and cost rules"
    )
    empty_tag_satisfies: bool = Field(
        False, description="Whether an empty billing tag value satisfies a tag rule"
    )
    access_denied_exempt: bool = Field(
        True, description="Whether unresolvable tags are exempt from a tag rule"
    )

    @model_validator(mode="after")
    def check_thresholds(self) -> "PolicyRule":
        if self.kind in (RuleKind.AGE_THRESHOLD, RuleKind.COST_DURATION) and self.min_age is None:
            raise ValueError(f"{self.kind.value} rule '{self.rule_id}' needs min_age")
        if self.kind == RuleKind.COST_DURATION and self.min_hourly_rate is None:
            raise ValueError(f"cost_duration rule '{self.rule_id}' needs min_hourly_rate")
        return self

    def is_whitelisted(self, record: ResourceRecord) -> bool:
        if record.name is not None and record.name in self.whitelist:
            return True
        return record.identifier in self.whitelist
