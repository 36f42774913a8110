"""Pytest configuration and shared fixtures."""

import logging
from unittest.mock import MagicMock

import pytest

from analyzer_reconciler.clients import AccessAnalyzerAPIError, AccessAnalyzerClient
from analyzer_reconciler.config import Settings
from analyzer_reconciler.models import (
    AnalyzerType,
    ArchiveRule,
    Filter,
    RemoteErrorKind,
    ResourceModel,
    Tag,
)

ANALYZER_NAME = "CanaryAnalyzerTest"
ANALYZER_ARN = f"arn:aws:access-analyzer:us-west-2:111111111111:analyzer/{ANALYZER_NAME}"
LOGICAL_RESOURCE_ID = "MyAnalyzer"
CLIENT_REQUEST_TOKEN = "ABC"


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_env(monkeypatch):
    """Set up test environment variables."""
    test_vars = {
        "AWS_REGION": "us-west-2",
        "LOG_LEVEL": "DEBUG",
        "LIST_MAX_RESULTS": "50",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


@pytest.fixture
def test_settings():
    """Settings with defaults, independent of the environment."""
    return Settings(_env_file=None)


# =============================================================================
# AWS Mocks
# =============================================================================

@pytest.fixture
def mock_client():
    """Mock Access Analyzer client with empty default responses."""
    client = MagicMock(spec=AccessAnalyzerClient)
    client.create_analyzer.return_value = ANALYZER_ARN
    client.get_analyzer.return_value = {}
    client.list_archive_rules.return_value = ([], None)
    client.list_analyzers.return_value = ([], None)
    return client


@pytest.fixture
def quiet_logger():
    """Logger sink that discards everything."""
    log = logging.getLogger("tests.quiet")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log


def api_error(kind: RemoteErrorKind, status_code: int | None = None, message: str = "boom"):
    """Build an AccessAnalyzerAPIError for a failure kind."""
    return AccessAnalyzerAPIError(
        kind=kind,
        message=message,
        status_code=status_code,
        error_code=kind.value,
    )


# =============================================================================
# Test Data Fixtures
# =============================================================================

def make_rule(name: str, *values: str, property_name: str = "principal.AWS") -> ArchiveRule:
    """Build a rule with a single eq filter."""
    return ArchiveRule(
        rule_name=name,
        filters=[Filter(property_name=property_name, eq=list(values or ("111111111111",)))],
    )


def make_tags(**pairs: str) -> list[Tag]:
    return [Tag(key=key, value=value) for key, value in pairs.items()]


@pytest.fixture
def existing_model():
    """Observed state of an existing account analyzer."""
    return ResourceModel(
        name=ANALYZER_NAME,
        arn=ANALYZER_ARN,
        kind=AnalyzerType.ACCOUNT,
        tags=make_tags(a="1", b="7"),
        rules=[make_rule("ArchiveOwnAccount")],
    )


# =============================================================================
# Pytest Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "property" in str(item.fspath):
            item.add_marker(pytest.mark.property)
