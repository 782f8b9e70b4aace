"""Service layer for the usage monitor."""

from .region_fanout import RegionFanout
from .policy_evaluator import PolicyEvaluator
from .report_formatter import Column, ReportFormatter, ReportLayout
from .report_sink import AlertPostError, ExportError, ReportSink
from .lifecycle_repair import LifecycleRepairer
from .families import FAMILIES, MonitorFamily, get_family
from .monitor_service import MonitorService

__all__ = [
    "RegionFanout",
    "PolicyEvaluator",
    "Column",
    "ReportFormatter",
    "ReportLayout",
    "AlertPostError",
    "ExportError",
    "ReportSink",
    "LifecycleRepairer",
    "FAMILIES",
    "MonitorFamily",
    "get_family",
    "MonitorService",
]
