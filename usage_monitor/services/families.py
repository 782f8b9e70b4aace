# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Registry of monitored families.

A family ties together one probe, the table and digest layout of its
report, and the rule set evaluated against its inventory. Rule sets are
built from settings at the start of each invocation.
"""

from dataclasses import dataclass
from typing import Callable

from ..config import Settings
from ..models.enums import AgeUnit, ResourceCategory, RuleKind
from ..models.policy import AgeThreshold, PolicyRule, RuleScope
from ..models.resource import ResourceRecord
from ..probes import (
    AddressProbe,
    BlockStorageProbe,
    BucketProbe,
    DatabaseProbe,
    FileSystemProbe,
    InstanceProbe,
    LoadBalancerProbe,
    MachineLearningProbe,
    ResourceProbe,
    TableProbe,
    TaskProbe,
)
from .report_formatter import MONTHLY_DECIMALS, RATE_DECIMALS, Column, ReportLayout


@dataclass(frozen=True)
class MonitorFamily:
    """One monitored family: probe, report layout and rule set."""

    name: str
    probe_class: type[ResourceProbe]
    layout: ReportLayout
    rules: Callable[[Settings], list[PolicyRule]]
    supports_lifecycle_repair: bool = False


def _billing(record: ResourceRecord) -> str:
    return record.billing_tag.display()


def _since(record: ResourceRecord):
    return record.created_at


def _region(record: ResourceRecord) -> str:
    return record.region


def _attached(record: ResourceRecord) -> list[str]:
    return [
        f"{name}({identifier})"
        for identifier, name in zip(record.related_identifiers, record.related_names)
    ]


def _detail(key: str) -> Callable[[ResourceRecord], object]:
    return lambda record: record.details.get(key)


NAME = Column("name", lambda r: r.name)
BILLING = Column("billing", _billing)
SINCE = Column("since", _since)
REGION = Column("region", _region)
TYPE = Column("type", lambda r: r.type_label)
PRICE_PER_HOUR = Column("pricePerHour", lambda r: r.cost_rate_per_hour, RATE_DECIMALS)
PRICE_PER_MONTH = Column("pricePerMonth", lambda r: r.cost_per_month, MONTHLY_DECIMALS)


def _display_name(record: ResourceRecord) -> str:
    return record.display_name


def _identifier(record: ResourceRecord) -> str:
    return record.identifier


def _missing_tag_rule(
    settings: Settings, rule_id: str, title: str, scope: RuleScope | None = None
) -> PolicyRule:
    return PolicyRule(
        rule_id=rule_id,
        kind=RuleKind.TAG_PRESENCE,
        title=f"{title} with no {settings.billing_tag_key}-tag found!",
        applies_to=scope or RuleScope(),
    )


def _simple_rules(rule_id: str, title: str) -> Callable[[Settings], list[PolicyRule]]:
    return lambda settings: [_missing_tag_rule(settings, rule_id, title)]


def _ec2_rules(settings: Settings) -> list[PolicyRule]:
    days = settings.long_running_min_days
    return [
        _missing_tag_rule(settings, "ec2-missing-billing-tag", "EC2 instances"),
        PolicyRule(
            rule_id="ec2-long-running",
            kind=RuleKind.COST_DURATION,
            title=f"Long-running EC2 instances (over {days} day{'s' if days != 1 else ''}) found!",
            applies_to=RuleScope(categories=frozenset([ResourceCategory.INSTANCE])),
            min_age=AgeThreshold(amount=days, unit=AgeUnit.DAYS),
            min_hourly_rate=settings.long_running_min_hourly_rate,
            whitelist=settings.long_running_whitelist_names,
        ),
    ]


def _ebs_rules(settings: Settings) -> list[PolicyRule]:
    volume_age = AgeThreshold(amount=settings.aged_volume_years, unit=AgeUnit.YEARS)
    snapshot_age = AgeThreshold(amount=settings.aged_snapshot_years, unit=AgeUnit.YEARS)
    return [
        _missing_tag_rule(settings, "ebs-missing-billing-tag", "EBS volumes and snapshots"),
        PolicyRule(
            rule_id="ebs-aged-volumes",
            kind=RuleKind.AGE_THRESHOLD,
            title=f"Old EBS volumes (over {volume_age.describe()}) found!",
            applies_to=RuleScope(categories=frozenset([ResourceCategory.VOLUME])),
            min_age=volume_age,
            whitelist=settings.aged_whitelist_names,
        ),
        PolicyRule(
            rule_id="ebs-aged-snapshots",
            kind=RuleKind.AGE_THRESHOLD,
            title=f"Old EBS snapshots (over {snapshot_age.describe()}) found!",
            applies_to=RuleScope(categories=frozenset([ResourceCategory.SNAPSHOT])),
            min_age=snapshot_age,
            whitelist=settings.aged_whitelist_names,
        ),
    ]


def _eip_rules(settings: Settings) -> list[PolicyRule]:
    return [
        _missing_tag_rule(
            settings, "eip-missing-billing-tag", "Unused Elastic IP",
            RuleScope(unattached_only=True),
        )
    ]


def _ecs_rules(settings: Settings) -> list[PolicyRule]:
    return [
        _missing_tag_rule(
            settings, "ecs-missing-billing-tag", "Fargate tasks",
            RuleScope(type_labels=frozenset(["FARGATE"])),
        )
    ]


FAMILIES: dict[str, MonitorFamily] = {
    family.name: family
    for family in [
        MonitorFamily(
            name="ec2",
            probe_class=InstanceProbe,
            layout=ReportLayout(
                family="ec2",
                title="ec2_instances",
                export_prefix="ec2",
                columns=(
                    Column("instanceId", _identifier), NAME, BILLING,
                    Column("instanceType", lambda r: r.type_label),
                    PRICE_PER_HOUR, PRICE_PER_MONTH, SINCE, REGION,
                ),
                digest_key=_identifier,
                digest_fields=(NAME, TYPE, PRICE_PER_HOUR, SINCE, REGION),
            ),
            rules=_ec2_rules,
        ),
        MonitorFamily(
            name="ebs",
            probe_class=BlockStorageProbe,
            layout=ReportLayout(
                family="ebs",
                title="ebs_volumes",
                export_prefix="ec2-extra",
                columns=(
                    Column("category", lambda r: r.category.value),
                    Column("id", _identifier), NAME, BILLING,
                    Column("size", lambda r: r.size_or_capacity), SINCE,
                    Column("attachedTo", lambda r: r.related_identifiers),
                    Column("attachedToName", lambda r: r.related_names),
                    REGION,
                ),
                digest_key=_display_name,
                digest_fields=(
                    Column("id", _identifier), BILLING,
                    Column("size", lambda r: r.size_or_capacity), SINCE,
                    Column("attachedTo", _attached), REGION,
                ),
            ),
            rules=_ebs_rules,
        ),
        MonitorFamily(
            name="eip",
            probe_class=AddressProbe,
            layout=ReportLayout(
                family="eip",
                title="eip_addresses",
                export_prefix="ec2-extra",
                columns=(
                    Column("publicIp", _identifier), NAME,
                    Column("associatedWith", lambda r: r.related_identifiers),
                    BILLING, REGION,
                ),
                digest_key=_display_name,
                digest_fields=(Column("publicIp", _identifier), REGION),
            ),
            rules=_eip_rules,
        ),
        MonitorFamily(
            name="rds",
            probe_class=DatabaseProbe,
            layout=ReportLayout(
                family="rds",
                title="rds_instances",
                export_prefix="rds",
                columns=(NAME, BILLING, TYPE, SINCE, REGION),
                digest_key=_display_name,
                digest_fields=(TYPE, SINCE, REGION),
            ),
            rules=_simple_rules("rds-missing-billing-tag", "RDS instances"),
        ),
        MonitorFamily(
            name="dynamodb",
            probe_class=TableProbe,
            layout=ReportLayout(
                family="dynamodb",
                title="dynamodb_tables",
                export_prefix="dynamodb",
                columns=(
                    NAME, BILLING, Column("rcu", _detail("rcu")),
                    Column("wcu", _detail("wcu")), SINCE, REGION,
                ),
                digest_key=_display_name,
                digest_fields=(
                    Column("rcu", _detail("rcu")), Column("wcu", _detail("wcu")), SINCE, REGION,
                ),
            ),
            rules=_simple_rules("dynamodb-missing-billing-tag", "DynamoDB tables"),
        ),
        MonitorFamily(
            name="ecs",
            probe_class=TaskProbe,
            layout=ReportLayout(
                family="ecs",
                title="ecs_tasks",
                export_prefix="ecs",
                columns=(
                    NAME, Column("cluster", _detail("cluster")), BILLING, TYPE,
                    Column("cpu", _detail("cpu")), Column("memory", _detail("memory")),
                    PRICE_PER_HOUR, PRICE_PER_MONTH, SINCE, REGION,
                ),
                digest_key=_display_name,
                digest_fields=(
                    Column("cluster", _detail("cluster")), Column("cpu", _detail("cpu")),
                    Column("memory", _detail("memory")), SINCE, REGION,
                ),
            ),
            rules=_ecs_rules,
        ),
        MonitorFamily(
            name="efs",
            probe_class=FileSystemProbe,
            layout=ReportLayout(
                family="efs",
                title="efs_filesystems",
                export_prefix="efs",
                columns=(
                    Column("id", _identifier), NAME, BILLING,
                    Column("sizeInStandard", _detail("size_standard")),
                    Column("sizeInIA", _detail("size_ia")), SINCE, REGION,
                ),
                digest_key=_display_name,
                digest_fields=(
                    Column("id", _identifier),
                    Column("sizeInStandard", _detail("size_standard")),
                    Column("sizeInIA", _detail("size_ia")), SINCE, REGION,
                ),
            ),
            rules=_simple_rules("efs-missing-billing-tag", "EFS file systems"),
        ),
        MonitorFamily(
            name="elb",
            probe_class=LoadBalancerProbe,
            layout=ReportLayout(
                family="elb",
                title="elb_instances",
                export_prefix="elb",
                columns=(NAME, BILLING, TYPE, SINCE, REGION),
                digest_key=_display_name,
                digest_fields=(TYPE, SINCE, REGION),
            ),
            rules=_simple_rules("elb-missing-billing-tag", "ELB instances"),
        ),
        MonitorFamily(
            name="s3",
            probe_class=BucketProbe,
            layout=ReportLayout(
                family="s3",
                title="s3_buckets",
                export_prefix="s3",
                columns=(
                    NAME, BILLING,
                    Column("versioning", _detail("versioning")),
                    Column("lifecycleRules", _detail("lifecycle_rules")),
                    Column("bucketSizeBytes", lambda r: r.size_or_capacity),
                    REGION,
                ),
                digest_key=_display_name,
                digest_fields=(
                    Column("versioning", _detail("versioning")), SINCE, REGION,
                ),
            ),
            rules=_simple_rules("s3-missing-billing-tag", "S3 buckets"),
            supports_lifecycle_repair=True,
        ),
        MonitorFamily(
            name="sagemaker",
            probe_class=MachineLearningProbe,
            layout=ReportLayout(
                family="sagemaker",
                title="sagemaker_resources",
                export_prefix="sagemaker",
                columns=(
                    Column("category", lambda r: r.category.value), NAME, BILLING,
                    Column("instanceType", lambda r: r.type_label), SINCE, REGION,
                ),
                digest_key=_display_name,
                digest_fields=(
                    Column("category", lambda r: r.category.value), TYPE, SINCE, REGION,
                ),
            ),
            rules=_simple_rules("sagemaker-missing-billing-tag", "SageMaker resources"),
        ),
    ]
}


def get_family(name: str) -> MonitorFamily:
    """
    Look up a registered family.

    Raises:
        KeyError: If no family has this name
    """
    try:
        return FAMILIES[name]
    except KeyError:
        raise KeyError(
            f"Unknown monitor family '{name}'. Known families: {', '.join(FAMILIES)}"
        ) from None
