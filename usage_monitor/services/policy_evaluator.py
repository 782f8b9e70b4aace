# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Policy evaluation of a merged inventory.

Each rule is evaluated independently over the records and produces one
violation bucket. Records keep their discovery order inside a bucket, and a
record may appear in several buckets when it fails several rules.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from ..models.enums import RuleKind, TagState
from ..models.policy import PolicyRule
from ..models.resource import ResourceRecord
from ..models.violations import Violation, ViolationBucket
from ..utils.time_utils import whole_units_between

logger = logging.getLogger(__name__)


class PolicyEvaluator:
    """
    Evaluates policy rules against resource records.

    Args:
        clock: Returns the evaluation time; defaults to UTC now
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def evaluate(
        self, records: list[ResourceRecord], rules: list[PolicyRule]
    ) -> dict[str, ViolationBucket]:
        """
        Evaluate every rule against every record.

        Args:
            records: Merged inventory, in discovery order
            rules: Rules to apply, in report order

        Returns:
            One bucket per rule id, empty buckets included, in rule order
        """
        now = self.clock()
        buckets: dict[str, ViolationBucket] = {}
        for rule in rules:
            violations = [
                Violation(record=record, rule_id=rule.rule_id)
                for record in records
                if self.violates(record, rule, now)
            ]
            buckets[rule.rule_id] = ViolationBucket(rule=rule, violations=violations)
            logger.debug(f"Rule {rule.rule_id}: {len(violations)} of {len(records)} records")
        return buckets

    def violates(self, record: ResourceRecord, rule: PolicyRule, now: datetime) -> bool:
        """Whether one record fails one rule at the given time."""
        if not rule.applies_to.matches(record):
            return False
        if rule.kind == RuleKind.TAG_PRESENCE:
            return self._missing_tag(record, rule)
        if rule.is_whitelisted(record):
            return False
        if rule.kind == RuleKind.AGE_THRESHOLD:
            return self._old_enough(record, rule, now)
        if rule.kind == RuleKind.COST_DURATION:
            rate = record.cost_rate_per_hour
            if rate is None or rate < rule.min_hourly_rate:
                return False
            return self._old_enough(record, rule, now)
        return False

    @staticmethod
    def _missing_tag(record: ResourceRecord, rule: PolicyRule) -> bool:
        tag = record.billing_tag
        if tag.state == TagState.UNRESOLVABLE:
            return not rule.access_denied_exempt
        if tag.state == TagState.ABSENT:
            return True
        return not tag.value and not rule.empty_tag_satisfies

    @staticmethod
    def _old_enough(record: ResourceRecord, rule: PolicyRule, now: datetime) -> bool:
        age = whole_units_between(record.created_at, now, rule.min_age.unit)
        return age >= rule.min_age.amount
