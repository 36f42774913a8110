# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Conversions between analyzer models and Access Analyzer API shapes."""

from typing import Any

from ..models import (
    AnalyzerConfiguration,
    AnalyzerType,
    ArchiveRule,
    Filter,
    ResourceModel,
    Tag,
    UnusedAccessConfiguration,
)


def tags_to_map(tags: list[Tag] | tuple[Tag, ...] | None) -> dict[str, str]:
    """Convert tags to the API's key -> value map."""
    return {tag.key: tag.value for tag in tags or ()}


def map_to_tags(tag_map: dict[str, str] | None) -> list[Tag]:
    """Convert an API tag map to tags, ordered by key."""
    return [Tag(key=key, value=value) for key, value in sorted((tag_map or {}).items())]


def filter_to_criterion(rule_filter: Filter) -> dict[str, Any]:
    """Build an API criterion from a filter, omitting unset predicates."""
    criterion: dict[str, Any] = {}
    if rule_filter.eq is not None:
        criterion["eq"] = list(rule_filter.eq)
    if rule_filter.neq is not None:
        criterion["neq"] = list(rule_filter.neq)
    if rule_filter.exists is not None:
        criterion["exists"] = rule_filter.exists
    if rule_filter.contains is not None:
        criterion["contains"] = list(rule_filter.contains)
    return criterion


def rule_filter_map(rule: ArchiveRule) -> dict[str, dict[str, Any]]:
    """Build the property -> criterion map the API expects for a rule."""
    return {f.property_name: filter_to_criterion(f) for f in rule.filters}


def rule_to_inline(rule: ArchiveRule) -> dict[str, Any]:
    """Convert a rule to the inline shape sent with create_analyzer."""
    return {"ruleName": rule.rule_name, "filter": rule_filter_map(rule)}


def rule_from_summary(summary: dict[str, Any]) -> ArchiveRule:
    """Rebuild a rule from an archive rule summary returned by the API."""
    filters = [
        Filter(
            property_name=property_name,
            eq=criterion.get("eq"),
            neq=criterion.get("neq"),
            exists=criterion.get("exists"),
            contains=criterion.get("contains"),
        )
        for property_name, criterion in (summary.get("filter") or {}).items()
    ]
    return ArchiveRule(rule_name=summary["ruleName"], filters=filters)


def unused_access_age(model: ResourceModel) -> int | None:
    """Unused access age configured on a model, if any."""
    configuration = model.configuration
    if configuration is None or configuration.unused_access_configuration is None:
        return None
    return configuration.unused_access_configuration.unused_access_age


def configuration_to_api(model: ResourceModel) -> dict[str, Any] | None:
    """
    Build the API configuration for create_analyzer.

    Only unused access kinds carry a configuration; for every other kind, or
    when the model sets no age, nothing is sent.
    """
    if model.kind is None or not model.kind.is_unused_access:
        return None
    age = unused_access_age(model)
    if age is None:
        return None
    return {"unusedAccess": {"unusedAccessAge": age}}


def configuration_from_api(
    kind: AnalyzerType | None, configuration: dict[str, Any] | None
) -> AnalyzerConfiguration | None:
    """Rebuild the model configuration from a get_analyzer response."""
    if kind is None or not kind.is_unused_access or not configuration:
        return None
    age = (configuration.get("unusedAccess") or {}).get("unusedAccessAge")
    if age is None:
        return None
    return AnalyzerConfiguration(
        unused_access_configuration=UnusedAccessConfiguration(unused_access_age=age)
    )


def analyzer_summary_to_model(summary: dict[str, Any]) -> ResourceModel:
    """Map a list_analyzers summary to the caller-facing model."""
    return ResourceModel(
        name=summary.get("name"),
        arn=summary.get("arn"),
        kind=summary.get("type"),
        tags=map_to_tags(summary.get("tags")),
    )
