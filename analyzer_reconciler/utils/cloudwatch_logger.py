"""Logging configuration and the CloudWatch Logs handler."""

import logging
import sys
import time
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import Settings
from .correlation import CorrelationIDFilter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"


class CloudWatchHandler(logging.Handler):
    """Custom logging handler that sends logs to AWS CloudWatch."""

    def __init__(
        self,
        log_group: str,
        log_stream: str,
        region: str = "us-east-1",
        client: Optional[Any] = None,
    ):
        """
        Initialize CloudWatch logging handler.

        Args:
            log_group: CloudWatch log group name
            log_stream: CloudWatch log stream name
            region: AWS region for CloudWatch
            client: Optional pre-built boto3 ``logs`` client
        """
        super().__init__()
        self.log_group = log_group
        self.log_stream = log_stream
        self.region = region
        self.client = client or boto3.client("logs", region_name=region)
        self._ensure_log_group_and_stream()

    def _ensure_log_group_and_stream(self) -> None:
        """Create log group and stream if they don't exist."""
        try:
            self.client.create_log_group(logGroupName=self.log_group)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                raise

        try:
            self.client.create_log_stream(
                logGroupName=self.log_group,
                logStreamName=self.log_stream,
            )
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                raise

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to CloudWatch.

        Args:
            record: The log record to emit
        """
        try:
            self.client.put_log_events(
                logGroupName=self.log_group,
                logStreamName=self.log_stream,
                logEvents=[
                    {
                        "message": self.format(record),
                        "timestamp": int(record.created * 1000),
                    }
                ],
            )
        except (ClientError, BotoCoreError):
            self.handleError(record)


def configure_logging(config: Settings) -> None:
    """
    Configure logging for the reconciler.

    Console output always goes to stdout. A CloudWatch handler is added to the
    root logger when enabled in settings; if the log group or stream cannot be
    prepared, the failure is reported on stderr and console logging continues.

    Args:
        config: Reconciler settings
    """
    numeric_level = getattr(logging, config.log_level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)
    correlation_filter = CorrelationIDFilter()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.addFilter(correlation_filter)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(console)

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(max(numeric_level, logging.INFO))

    if not config.cloudwatch_enabled:
        return

    log_stream = config.cloudwatch_log_stream or f"reconciler-{int(time.time())}"
    try:
        handler = CloudWatchHandler(
            log_group=config.cloudwatch_log_group,
            log_stream=log_stream,
            region=config.aws_region,
        )
    except (ClientError, BotoCoreError) as e:
        print(f"Failed to configure CloudWatch logging: {e}", file=sys.stderr)
        return

    handler.setFormatter(formatter)
    handler.addFilter(correlation_filter)
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        f"CloudWatch logging configured: group={config.cloudwatch_log_group}, stream={log_stream}"
    )
