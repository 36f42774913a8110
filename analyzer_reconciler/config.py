# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Reconciler settings.

Values come from environment variables (or a local .env file). Every field
has a default, so a bare environment yields a working configuration aimed at
us-east-1.
"""

from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings shared by the handler, the reconciler and the AWS clients.

    Fields can be given by environment variable name or, when constructed
    in code, by field name.
    """

    log_level: str = Field(
        default="INFO",
        description="Root log level name",
        validation_alias="LOG_LEVEL"
    )

    # AWS
    aws_region: str = Field(
        default="us-east-1",
        description="Region used when an envelope names none",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION")
    )
    # Access Analyzer regularly takes 20s or more on first use in an account,
    # and the invoking harness gives a handler roughly 60s in total.
    api_call_attempt_timeout: int = Field(
        default=19,
        description="Connect/read timeout in seconds for a single API attempt",
        ge=1,
        validation_alias="API_CALL_ATTEMPT_TIMEOUT"
    )
    max_attempts: int = Field(
        default=4,
        description="Total attempts per API call made by the transport layer",
        ge=1,
        le=10,
        validation_alias="AWS_MAX_ATTEMPTS"
    )

    # Reconciler
    list_max_results: int = Field(
        default=100,
        description="Page size requested when listing analyzers",
        ge=1,
        le=1000,
        validation_alias="LIST_MAX_RESULTS"
    )
    analyzer_name_max_length: int = Field(
        default=255,
        description="Maximum length of a generated analyzer name",
        ge=16,
        validation_alias="ANALYZER_NAME_MAX_LENGTH"
    )

    # CloudWatch Logs
    cloudwatch_enabled: bool = Field(
        default=False,
        description="Also ship log records to CloudWatch Logs",
        validation_alias="CLOUDWATCH_ENABLED"
    )
    cloudwatch_log_group: str = Field(
        default="/access-analyzer/reconciler",
        description="Destination log group",
        validation_alias="CLOUDWATCH_LOG_GROUP"
    )
    cloudwatch_log_stream: Optional[str] = Field(
        default=None,
        description="Destination log stream (timestamped name when unset)",
        validation_alias="CLOUDWATCH_LOG_STREAM"
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


def get_settings() -> Settings:
    """Load a fresh Settings from the environment and .env."""
    return Settings()


_settings: Optional[Settings] = None


def settings() -> Settings:
    """
    Process-wide Settings, loaded on first use.

    Warm invocations in the same process share this instance.
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings
