# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Violation data models."""

from pydantic import BaseModel, ConfigDict, Field

from .policy import PolicyRule
from .resource import ResourceRecord


class Violation(BaseModel):
    """A record that failed one rule."""

    model_config = ConfigDict(frozen=True)

    record: ResourceRecord = Field(..., description="The violating record")
    rule_id: str = Field(..., description="Identifier of the violated rule")


class ViolationBucket(BaseModel):
    """Violations of one rule in discovery order."""

    rule: PolicyRule = Field(..., description="The rule these violations belong to")
    violations: list[Violation] = Field(default_factory=list)

    @property
    def rule_id(self) -> str:
        return self.rule.rule_id

    @property
    def records(self) -> list[ResourceRecord]:
        return [v.record for v in self.violations]

    def __len__(self) -> int:
        return len(self.violations)
