# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""ARN parsing and validation utilities."""

import re
from typing import Optional


# arn:partition:service:region:account:resource, resource may contain colons
ARN_PATTERN = re.compile(r"^arn:aws[a-z-]*:[a-z0-9-]+:[a-z0-9-]*:[0-9]*:.+")

ANALYZER_SERVICE = "access-analyzer"
ANALYZER_RESOURCE_TYPE = "analyzer"


def is_valid_arn(arn: Optional[str]) -> bool:
    """
    Validate if a string is a valid AWS ARN format.

    Args:
        arn: String to validate

    Returns:
        True if valid ARN format, False otherwise
    """
    if not arn or not isinstance(arn, str):
        return False

    return bool(ARN_PATTERN.match(arn))


def parse_arn(arn: str) -> dict[str, str]:
    """
    Parse an AWS ARN into its components.

    Args:
        arn: AWS ARN string

    Returns:
        Dictionary with parsed ARN components:
        - partition: AWS partition (aws, aws-cn, aws-us-gov)
        - service: AWS service name (access-analyzer, s3, ...)
        - region: AWS region (may be empty)
        - account: AWS account ID (may be empty)
        - resource: Full resource part of ARN
        - resource_type: Leading segment of the resource part, "" if none
        - resource_id: Resource identifier extracted from the resource part

    Raises:
        ValueError: If ARN format is invalid

    Example:
        >>> parse_arn("arn:aws:access-analyzer:us-west-2:111111111111:analyzer/Canary")
        {
            'partition': 'aws',
            'service': 'access-analyzer',
            'region': 'us-west-2',
            'account': '111111111111',
            'resource': 'analyzer/Canary',
            'resource_type': 'analyzer',
            'resource_id': 'Canary'
        }
    """
    if not is_valid_arn(arn):
        raise ValueError(f"Invalid ARN format: {arn}")

    parts = arn.split(":")
    resource = ":".join(parts[5:])
    resource_type, resource_id = split_resource(resource)

    return {
        "partition": parts[1],
        "service": parts[2],
        "region": parts[3],
        "account": parts[4],
        "resource": resource,
        "resource_type": resource_type,
        "resource_id": resource_id,
    }


def split_resource(resource: str) -> tuple[str, str]:
    """
    Split the resource part of an ARN into type and identifier.

    Handles the two qualified forms (``type/id`` and ``type:id``) and the
    bare form (``id``), for which the type is empty.

    Example:
        >>> split_resource("analyzer/MyAnalyzer")
        ('analyzer', 'MyAnalyzer')
        >>> split_resource("bucket-name")
        ('', 'bucket-name')
    """
    for separator in ("/", ":"):
        if separator in resource:
            resource_type, _, resource_id = resource.partition(separator)
            return resource_type, resource_id
    return "", resource


def is_analyzer_arn(arn: Optional[str]) -> bool:
    """Check that an ARN names an Access Analyzer analyzer."""
    try:
        parsed = parse_arn(arn or "")
    except ValueError:
        return False
    return (
        parsed["service"] == ANALYZER_SERVICE
        and parsed["resource_type"] == ANALYZER_RESOURCE_TYPE
        and bool(parsed["resource_id"])
    )
