"""Service layer for the analyzer reconciler."""

from .differ import diff_rules, diff_tags
from .error_classifier import InternalFailureError, classify, classify_error
from .identity import existing_name, generate_resource_identifier, name_from_arn, resolve_name
from .paginator import paginate
from .planner import plan
from .reconciler import AnalyzerReconciler

__all__ = [
    "diff_rules",
    "diff_tags",
    "InternalFailureError",
    "classify",
    "classify_error",
    "existing_name",
    "generate_resource_identifier",
    "name_from_arn",
    "resolve_name",
    "paginate",
    "plan",
    "AnalyzerReconciler",
]
