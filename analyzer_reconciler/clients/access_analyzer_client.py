# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Access Analyzer client wrapper."""

import logging
from typing import Any, Callable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings
from ..models import RemoteErrorKind

logger = logging.getLogger(__name__)


class AccessAnalyzerAPIError(Exception):
    """Raised when an Access Analyzer API call fails."""

    def __init__(
        self,
        kind: RemoteErrorKind,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.operation = operation

    @classmethod
    def from_client_error(cls, error: ClientError, operation: str) -> "AccessAnalyzerAPIError":
        """Translate a botocore ClientError into a typed API error."""
        error_info = error.response.get("Error", {})
        error_code = error_info.get("Code", "")
        status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        return cls(
            kind=RemoteErrorKind.from_error_code(error_code),
            message=error_info.get("Message") or str(error),
            status_code=status_code,
            error_code=error_code,
            operation=operation,
        )


def build_boto_config(config: Settings, region: str | None = None) -> Config:
    """
    Build the botocore configuration applied to every Access Analyzer client.

    Timeouts and the transport retry budget live here; the reconciler itself
    never retries.
    """
    return Config(
        region_name=region or config.aws_region,
        connect_timeout=config.api_call_attempt_timeout,
        read_timeout=config.api_call_attempt_timeout,
        retries={
            "max_attempts": config.max_attempts,
            "mode": "standard",
        },
    )


class AccessAnalyzerClient:
    """
    Wrapper around the boto3 ``accessanalyzer`` client.

    Exposes the remote operations the reconciler needs with plain Python
    arguments and return values. Every failure surfaces as
    AccessAnalyzerAPIError; nothing is retried at this layer beyond what
    the botocore transport does.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        client: Any | None = None,
        boto_config: Config | None = None,
    ):
        """
        Initialize the Access Analyzer client.

        Args:
            region: AWS region to use
            client: Optional pre-built boto3 client (used by tests)
            boto_config: Optional botocore Config for the new client
        """
        self.region = region
        self.client = client or boto3.client(
            "accessanalyzer", region_name=region, config=boto_config
        )

    def _call(self, operation: str, func: Callable[..., dict], **kwargs: Any) -> dict:
        """
        Call an API method, dropping unset parameters.

        Raises:
            AccessAnalyzerAPIError: If the call fails
        """
        params = {key: value for key, value in kwargs.items() if value is not None}
        try:
            return func(**params)
        except ClientError as e:
            error = AccessAnalyzerAPIError.from_client_error(e, operation)
            logger.debug(
                f"{operation} failed: {error.error_code} ({error.status_code}) {error.message}"
            )
            raise error from e
        except BotoCoreError as e:
            raise AccessAnalyzerAPIError(
                kind=RemoteErrorKind.UNKNOWN,
                message=f"Boto3 error: {str(e)}",
                operation=operation,
            ) from e

    def create_analyzer(
        self,
        name: str,
        analyzer_type: str,
        archive_rules: list[dict[str, Any]] | None = None,
        tags: dict[str, str] | None = None,
        configuration: dict[str, Any] | None = None,
    ) -> str | None:
        """
        Create an analyzer.

        Returns:
            The ARN assigned by the service (None if the response omits it)
        """
        response = self._call(
            "CreateAnalyzer",
            self.client.create_analyzer,
            analyzerName=name,
            type=analyzer_type,
            archiveRules=archive_rules,
            tags=tags,
            configuration=configuration,
        )
        return response.get("arn")

    def get_analyzer(self, name: str) -> dict[str, Any]:
        """Fetch an analyzer summary (arn, name, type, tags, configuration, ...)."""
        response = self._call("GetAnalyzer", self.client.get_analyzer, analyzerName=name)
        return response.get("analyzer", {})

    def list_archive_rules(
        self, name: str, next_token: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Fetch one page of archive rule summaries for an analyzer."""
        response = self._call(
            "ListArchiveRules",
            self.client.list_archive_rules,
            analyzerName=name,
            nextToken=next_token,
        )
        return response.get("archiveRules", []), response.get("nextToken")

    def delete_analyzer(self, name: str) -> None:
        self._call("DeleteAnalyzer", self.client.delete_analyzer, analyzerName=name)

    def tag_resource(self, arn: str, tags: dict[str, str]) -> None:
        self._call("TagResource", self.client.tag_resource, resourceArn=arn, tags=tags)

    def untag_resource(self, arn: str, tag_keys: list[str]) -> None:
        self._call("UntagResource", self.client.untag_resource, resourceArn=arn, tagKeys=tag_keys)

    def create_archive_rule(
        self, name: str, rule_name: str, rule_filter: dict[str, dict[str, Any]]
    ) -> None:
        self._call(
            "CreateArchiveRule",
            self.client.create_archive_rule,
            analyzerName=name,
            ruleName=rule_name,
            filter=rule_filter,
        )

    def update_archive_rule(
        self, name: str, rule_name: str, rule_filter: dict[str, dict[str, Any]]
    ) -> None:
        self._call(
            "UpdateArchiveRule",
            self.client.update_archive_rule,
            analyzerName=name,
            ruleName=rule_name,
            filter=rule_filter,
        )

    def delete_archive_rule(self, name: str, rule_name: str) -> None:
        self._call(
            "DeleteArchiveRule",
            self.client.delete_archive_rule,
            analyzerName=name,
            ruleName=rule_name,
        )

    def list_analyzers(
        self, next_token: str | None = None, max_results: int | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Fetch one page of analyzer summaries."""
        response = self._call(
            "ListAnalyzers",
            self.client.list_analyzers,
            nextToken=next_token,
            maxResults=max_results,
        )
        return response.get("analyzers", []), response.get("nextToken")
