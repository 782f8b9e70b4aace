# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Static price tables used to estimate hourly cost rates.

Prices are on-demand Linux rates in USD per hour (us-east-1). They are
estimates for prioritising alerts, not billing data.
"""

FARGATE_CPU_PRICE_PER_HOUR = 0.04048
FARGATE_MEMORY_PRICE_PER_HOUR = 0.004445

EC2_HOURLY_PRICES: dict[str, float] = {
    "t2.nano": 0.0058,
    "t2.micro": 0.0116,
    "t2.small": 0.023,
    "t2.medium": 0.0464,
    "t2.large": 0.0928,
    "t2.xlarge": 0.1856,
    "t3.nano": 0.0052,
    "t3.micro": 0.0104,
    "t3.small": 0.0208,
    "t3.medium": 0.0416,
    "t3.large": 0.0832,
    "t3.xlarge": 0.1664,
    "t3.2xlarge": 0.3328,
    "m5.large": 0.096,
    "m5.xlarge": 0.192,
    "m5.2xlarge": 0.384,
    "m5.4xlarge": 0.768,
    "m5.12xlarge": 2.304,
    "m6i.large": 0.096,
    "m6i.xlarge": 0.192,
    "m6i.2xlarge": 0.384,
    "c5.large": 0.085,
    "c5.xlarge": 0.17,
    "c5.2xlarge": 0.34,
    "c5.4xlarge": 0.68,
    "c5.9xlarge": 1.53,
    "r5.large": 0.126,
    "r5.xlarge": 0.252,
    "r5.2xlarge": 0.504,
    "r5.4xlarge": 1.008,
    "p2.xlarge": 0.9,
    "p2.8xlarge": 7.2,
    "p3.2xlarge": 3.06,
    "p3.8xlarge": 12.24,
    "p3.16xlarge": 24.48,
    "g4dn.xlarge": 0.526,
    "g4dn.2xlarge": 0.752,
    "g4dn.12xlarge": 3.912,
    "g5.xlarge": 1.006,
    "g5.2xlarge": 1.212,
}


def ec2_hourly_rate(instance_type: str | None) -> float | None:
    """Hourly rate for an instance type, None when the type is not priced."""
    if not instance_type:
        return None
    return EC2_HOURLY_PRICES.get(instance_type)


def fargate_hourly_rate(cpu_units: float | None, memory_mib: float | None) -> float | None:
    """Hourly Fargate rate from task CPU units (1024 = 1 vCPU) and memory in MiB."""
    if cpu_units is None or memory_mib is None:
        return None
    return (
        (cpu_units / 1024) * FARGATE_CPU_PRICE_PER_HOUR
        + (memory_mib / 1024) * FARGATE_MEMORY_PRICE_PER_HOUR
    )
