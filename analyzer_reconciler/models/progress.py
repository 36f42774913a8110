"""Lifecycle outcome model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .analyzer import ResourceModel
from .enums import HandlerErrorCode, OperationStatus


class ProgressEvent(BaseModel):
    """Outcome of one lifecycle invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: OperationStatus = Field(..., alias="status")
    resource_model: ResourceModel | None = Field(None, alias="resourceModel")
    resource_models: list[ResourceModel] | None = Field(None, alias="resourceModels")
    next_token: str | None = Field(None, alias="nextToken")
    error_code: HandlerErrorCode | None = Field(None, alias="errorCode")
    message: str | None = Field(None, alias="message")

    @classmethod
    def success(cls, model: ResourceModel | None = None) -> "ProgressEvent":
        return cls(status=OperationStatus.SUCCESS, resource_model=model)

    @classmethod
    def success_list(
        cls, models: list[ResourceModel], next_token: str | None = None
    ) -> "ProgressEvent":
        return cls(status=OperationStatus.SUCCESS, resource_models=models, next_token=next_token)

    @classmethod
    def failed(cls, error_code: HandlerErrorCode, message: str) -> "ProgressEvent":
        return cls(status=OperationStatus.FAILED, error_code=error_code, message=message)

    @property
    def succeeded(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the invocation harness, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
