"""Data models for the analyzer reconciler."""

from .enums import AnalyzerType, HandlerErrorCode, OpAction, OperationStatus, RemoteErrorKind
from .analyzer import (
    AnalyzerConfiguration,
    ArchiveRule,
    Filter,
    ResourceModel,
    Tag,
    UnusedAccessConfiguration,
)
from .plan import RemoteOp, RuleDiff, TagDiff
from .progress import ProgressEvent

__all__ = [
    "AnalyzerType",
    "HandlerErrorCode",
    "OpAction",
    "OperationStatus",
    "RemoteErrorKind",
    "AnalyzerConfiguration",
    "ArchiveRule",
    "Filter",
    "ResourceModel",
    "Tag",
    "UnusedAccessConfiguration",
    "RemoteOp",
    "RuleDiff",
    "TagDiff",
    "ProgressEvent",
]
