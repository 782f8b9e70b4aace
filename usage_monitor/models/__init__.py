"""Data models for the usage monitor."""

from .enums import AgeUnit, ResourceCategory, RuleKind, TagState
from .resource import BillingTag, ResourceRecord
from .policy import AgeThreshold, PolicyRule, RuleScope
from .violations import Violation, ViolationBucket
from .inventory import FamilyReport, InventoryResult, RegionalInventory, RepairOutcome
from .event import MonitorEvent

__all__ = [
    "AgeUnit",
    "ResourceCategory",
    "RuleKind",
    "TagState",
    "BillingTag",
    "ResourceRecord",
    "AgeThreshold",
    "PolicyRule",
    "RuleScope",
    "Violation",
    "ViolationBucket",
    "FamilyReport",
    "InventoryResult",
    "RegionalInventory",
    "RepairOutcome",
    "MonitorEvent",
]
