"""Access Analyzer client wrapper module."""

from .access_analyzer_client import AccessAnalyzerAPIError, AccessAnalyzerClient, build_boto_config
from .regional_client_factory import RegionalClientFactory

__all__ = [
    "AccessAnalyzerAPIError",
    "AccessAnalyzerClient",
    "RegionalClientFactory",
    "build_boto_config",
]
