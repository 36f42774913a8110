# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Classification of remote failures into handler error codes.

The classifier is a pure function so each call site in the reconciler can
apply it to the failure in flight and then decide what the outcome means
for that operation (a not-found during an update, for example, reports
that the analyzer must be re-created).
"""

from ..clients.access_analyzer_client import AccessAnalyzerAPIError
from ..models import HandlerErrorCode, RemoteErrorKind

# HTTP status the service uses for request validation failures
SERVICE_VALIDATION_STATUS_CODE = 400

# Declared failure kinds, in priority order
_KIND_TO_ERROR_CODE: dict[RemoteErrorKind, HandlerErrorCode] = {
    RemoteErrorKind.SERVICE_QUOTA_EXCEEDED: HandlerErrorCode.SERVICE_LIMIT_EXCEEDED,
    RemoteErrorKind.ACCESS_DENIED: HandlerErrorCode.ACCESS_DENIED,
    RemoteErrorKind.RESOURCE_NOT_FOUND: HandlerErrorCode.NOT_FOUND,
    RemoteErrorKind.CONFLICT: HandlerErrorCode.INVALID_REQUEST,
    RemoteErrorKind.VALIDATION: HandlerErrorCode.INVALID_REQUEST,
    RemoteErrorKind.THROTTLING: HandlerErrorCode.THROTTLING,
}


class InternalFailureError(Exception):
    """Raised when a locally checked invariant does not hold.

    These conditions cannot be produced by ordinary remote behaviour and are
    reported as InternalFailure, never as ServiceInternalError.
    """

    pass


def classify(kind: RemoteErrorKind, status_code: int | None = None) -> HandlerErrorCode:
    """
    Map a remote failure onto a handler error code.

    Args:
        kind: Failure kind declared by the service (UNKNOWN for generic failures)
        status_code: HTTP status of the failed call, if one was received

    Returns:
        The handler error code for the failure
    """
    if kind in _KIND_TO_ERROR_CODE:
        return _KIND_TO_ERROR_CODE[kind]
    if status_code == SERVICE_VALIDATION_STATUS_CODE:
        return HandlerErrorCode.INVALID_REQUEST
    return HandlerErrorCode.SERVICE_INTERNAL_ERROR


def classify_error(error: AccessAnalyzerAPIError) -> HandlerErrorCode:
    """Classify an AccessAnalyzerAPIError."""
    return classify(error.kind, error.status_code)
