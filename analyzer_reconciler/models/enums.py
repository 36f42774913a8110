"""Enumerations for analyzer kinds, outcomes and remote failures."""

from enum import Enum


class AnalyzerType(str, Enum):
    """Kinds of analyzer. Immutable once the analyzer exists."""

    ACCOUNT = "ACCOUNT"
    ORGANIZATION = "ORGANIZATION"
    ACCOUNT_UNUSED_ACCESS = "ACCOUNT_UNUSED_ACCESS"
    ORGANIZATION_UNUSED_ACCESS = "ORGANIZATION_UNUSED_ACCESS"
    ACCOUNT_INTERNAL_ACCESS = "ACCOUNT_INTERNAL_ACCESS"
    ORGANIZATION_INTERNAL_ACCESS = "ORGANIZATION_INTERNAL_ACCESS"

    @property
    def is_unused_access(self) -> bool:
        """Whether this kind accepts an unused access configuration."""
        return self in (AnalyzerType.ACCOUNT_UNUSED_ACCESS, AnalyzerType.ORGANIZATION_UNUSED_ACCESS)


class OperationStatus(str, Enum):
    """Terminal status of a lifecycle invocation."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class HandlerErrorCode(str, Enum):
    """Outcome codes reported for failed lifecycle invocations."""

    ACCESS_DENIED = "AccessDenied"
    INVALID_REQUEST = "InvalidRequest"
    NOT_FOUND = "NotFound"
    SERVICE_LIMIT_EXCEEDED = "ServiceLimitExceeded"
    THROTTLING = "Throttling"
    NOT_UPDATABLE = "NotUpdatable"
    INTERNAL_FAILURE = "InternalFailure"
    SERVICE_INTERNAL_ERROR = "ServiceInternalError"


class RemoteErrorKind(str, Enum):
    """Failure kinds declared by the Access Analyzer API."""

    SERVICE_QUOTA_EXCEEDED = "ServiceQuotaExceededException"
    ACCESS_DENIED = "AccessDeniedException"
    RESOURCE_NOT_FOUND = "ResourceNotFoundException"
    CONFLICT = "ConflictException"
    VALIDATION = "ValidationException"
    THROTTLING = "ThrottlingException"
    INTERNAL_SERVER = "InternalServerException"
    UNKNOWN = "Unknown"

    @classmethod
    def from_error_code(cls, error_code: str | None) -> "RemoteErrorKind":
        """Map a botocore error code onto a kind, UNKNOWN when unrecognised."""
        for kind in cls:
            if kind.value == error_code:
                return kind
        return cls.UNKNOWN


class OpAction(str, Enum):
    """Remote mutations issued by an update, in plan order."""

    UNTAG = "untag"
    TAG = "tag"
    DELETE_RULE = "delete_rule"
    CREATE_RULE = "create_rule"
    UPDATE_RULE = "update_rule"
