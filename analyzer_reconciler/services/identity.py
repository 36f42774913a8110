# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Analyzer name resolution.

An analyzer is addressed by name. The name is either supplied by the caller,
invented at creation from the logical resource id and the client request
token, or recovered from the analyzer ARN when the caller does not echo the
name it was created with.
"""

import hashlib
import string

from ..models import ResourceModel
from ..utils.arn_utils import is_analyzer_arn, parse_arn
from .error_classifier import InternalFailureError

ANALYZER_NAME_MAX_LENGTH = 255

# Length of the token-derived suffix of a generated name
GUID_LENGTH = 12

_SUFFIX_ALPHABET = string.ascii_letters + string.digits


def generate_resource_identifier(
    logical_id: str | None, request_token: str, max_length: int = ANALYZER_NAME_MAX_LENGTH
) -> str:
    """
    Generate a name from a logical resource id and a request token.

    The result is ``<logical id>-<suffix>``, where the suffix is 12
    alphanumeric characters derived from the token and the logical id is
    truncated so the whole name fits in ``max_length``. The same inputs
    always produce the same name, so a retried request reuses it.

    Args:
        logical_id: Logical id of the resource in the caller's template
        request_token: Client request token of the invocation
        max_length: Maximum length of the generated name

    Returns:
        Generated name

    Example:
        >>> name = generate_resource_identifier("MyAnalyzer", "ABC")
        >>> name.startswith("MyAnalyzer-"), len(name)
        (True, 23)
    """
    if max_length <= GUID_LENGTH + 1:
        raise ValueError(f"max_length must exceed {GUID_LENGTH + 1}, got {max_length}")

    digest = hashlib.sha256(request_token.encode("utf-8")).digest()
    suffix = "".join(_SUFFIX_ALPHABET[b % len(_SUFFIX_ALPHABET)] for b in digest[:GUID_LENGTH])

    prefix = (logical_id or "")[: max_length - GUID_LENGTH - 1]
    if not prefix:
        return suffix
    return f"{prefix}-{suffix}"


def resolve_name(
    model: ResourceModel,
    logical_id: str | None,
    request_token: str,
    max_length: int = ANALYZER_NAME_MAX_LENGTH,
) -> tuple[str, ResourceModel]:
    """
    Resolve the name to create an analyzer under.

    Returns:
        The name and the model carrying it. The model is returned unchanged
        when it already has a non-empty name.
    """
    if model.name:
        return model.name, model
    name = generate_resource_identifier(logical_id, request_token, max_length)
    return name, model.model_copy(update={"name": name})


def name_from_arn(arn: str) -> str:
    """
    Extract the analyzer name from an analyzer ARN.

    Raises:
        InternalFailureError: If the ARN is not an analyzer ARN
    """
    if not is_analyzer_arn(arn):
        raise InternalFailureError(f"Malformed analyzer ARN: {arn!r}")
    return parse_arn(arn)["resource_id"]


def existing_name(model: ResourceModel) -> str:
    """
    Name of an existing analyzer.

    Prefers the explicit name and falls back to the ARN, since callers are
    inconsistent about echoing the name used at creation.

    Raises:
        InternalFailureError: If there is no name and the ARN is missing or malformed
    """
    if model.name:
        return model.name
    if not model.arn:
        raise InternalFailureError("Analyzer has neither a name nor an ARN")
    return name_from_arn(model.arn)
