# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Enumerations shared by records, rules and probes."""

from enum import Enum


class ResourceCategory(str, Enum):
    """Category of an inventoried resource."""

    INSTANCE = "instance"
    VOLUME = "volume"
    SNAPSHOT = "snapshot"
    ADDRESS = "address"
    DATABASE = "database"
    TABLE = "table"
    TASK = "task"
    FILE_SYSTEM = "file_system"
    LOAD_BALANCER = "load_balancer"
    BUCKET = "bucket"
    NOTEBOOK = "notebook"
    TRAINING = "training"
    ENDPOINT = "endpoint"


class TagState(str, Enum):
    """Observed state of the billing tag on a resource."""

    PRESENT = "present"
    ABSENT = "absent"
    UNRESOLVABLE = "unresolvable"


class RuleKind(str, Enum):
    """Kinds of policy rules."""

    TAG_PRESENCE = "tag_presence"
    AGE_THRESHOLD = "age_threshold"
    COST_DURATION = "cost_duration"


class AgeUnit(str, Enum):
    """Whole calendar units used by age thresholds."""

    YEARS = "years"
    DAYS = "days"
