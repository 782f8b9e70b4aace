"""Per-family resource probes."""

from .base import ResourceProbe
from .dynamodb import TableProbe
from .ebs import BlockStorageProbe
from .ec2 import AddressProbe, InstanceProbe
from .ecs import TaskProbe
from .efs import FileSystemProbe
from .elb import LoadBalancerProbe
from .rds import DatabaseProbe
from .s3 import BucketProbe
from .sagemaker import MachineLearningProbe

__all__ = [
    "ResourceProbe",
    "AddressProbe",
    "BlockStorageProbe",
    "BucketProbe",
    "DatabaseProbe",
    "FileSystemProbe",
    "InstanceProbe",
    "LoadBalancerProbe",
    "MachineLearningProbe",
    "TableProbe",
    "TaskProbe",
]
