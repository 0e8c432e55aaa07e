"""Core functionality: report decoding, retention policy and disposal."""

from ddh_remover.core.disposer import Disposer, Outcome, PathResult
from ddh_remover.core.errors import (
    ConfigError,
    DDHRemoverError,
    FileNameError,
    ReportError,
)
from ddh_remover.core.processor import GroupReport, process_groups
from ddh_remover.core.report import DuplicateGroup, parse_report, read_report
from ddh_remover.core.resolver import RetentionPolicy, WorkItem, is_eligible, resolve

__all__ = [
    "ConfigError",
    "DDHRemoverError",
    "Disposer",
    "DuplicateGroup",
    "FileNameError",
    "GroupReport",
    "Outcome",
    "PathResult",
    "ReportError",
    "RetentionPolicy",
    "WorkItem",
    "is_eligible",
    "parse_report",
    "process_groups",
    "read_report",
    "resolve",
]
