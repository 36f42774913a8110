# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Analyzer resource data models.

Field aliases match the property names of the resource schema, so a model can
be built directly from an invocation envelope and dumped back with
``by_alias=True``.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import AnalyzerType


class Tag(BaseModel):
    """A key/value tag. Keys are unique within an analyzer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(..., alias="Key", min_length=1, max_length=128)
    value: str = Field(..., alias="Value", max_length=256)


class Filter(BaseModel):
    """A single criterion of an archive rule, keyed by finding property."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    property_name: str = Field(..., alias="Property", description="Finding property to match")
    eq: list[str] | None = Field(None, alias="Eq")
    neq: list[str] | None = Field(None, alias="Neq")
    exists: bool | None = Field(None, alias="Exists")
    contains: list[str] | None = Field(None, alias="Contains")


class ArchiveRule(BaseModel):
    """A named archive rule. Two rules with the same name differ by filters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rule_name: str = Field(..., alias="RuleName", min_length=1)
    filters: list[Filter] = Field(default_factory=list, alias="Filter")


class UnusedAccessConfiguration(BaseModel):
    """Settings for unused access analyzers."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    unused_access_age: int | None = Field(
        None,
        alias="UnusedAccessAge",
        ge=1,
        le=365,
        description="Days without use after which access is reported as unused",
    )


class AnalyzerConfiguration(BaseModel):
    """Kind-specific analyzer configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    unused_access_configuration: UnusedAccessConfiguration | None = Field(
        None, alias="UnusedAccessConfiguration"
    )


class ResourceModel(BaseModel):
    """Declared or observed state of one analyzer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = Field(None, alias="AnalyzerName", max_length=255)
    arn: str | None = Field(None, alias="Arn", description="Assigned by the service at creation")
    kind: AnalyzerType | None = Field(None, alias="Type")
    configuration: AnalyzerConfiguration | None = Field(None, alias="AnalyzerConfiguration")
    tags: list[Tag] | None = Field(None, alias="Tags")
    rules: list[ArchiveRule] | None = Field(None, alias="ArchiveRules")

    @field_validator("tags")
    @classmethod
    def _unique_tag_keys(cls, tags: list[Tag] | None) -> list[Tag] | None:
        if tags:
            keys = [tag.key for tag in tags]
            duplicates = sorted({key for key in keys if keys.count(key) > 1})
            if duplicates:
                raise ValueError(f"Duplicate tag keys: {duplicates}")
        return tags

    @field_validator("rules")
    @classmethod
    def _unique_rule_names(cls, rules: list[ArchiveRule] | None) -> list[ArchiveRule] | None:
        if rules:
            names = [rule.rule_name for rule in rules]
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ValueError(f"Duplicate archive rule names: {duplicates}")
        return rules
