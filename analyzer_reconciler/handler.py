# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Invocation envelope decoding and dispatch.

An envelope names the lifecycle action and carries the models it needs:

    {
        "action": "CREATE" | "READ" | "UPDATE" | "DELETE" | "LIST",
        "region": "us-east-1",
        "logicalResourceIdentifier": "MyAnalyzer",
        "clientRequestToken": "...",
        "desiredResourceState": {...},
        "previousResourceState": {...},
        "nextToken": null
    }

The response is the ProgressEvent in wire form.
"""

import logging
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from .clients import AccessAnalyzerClient, RegionalClientFactory
from .config import Settings, settings
from .models import HandlerErrorCode, ProgressEvent, ResourceModel
from .services import AnalyzerReconciler
from .utils.correlation import correlation_scope

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Lifecycle actions accepted in an envelope."""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LIST = "LIST"


# Clients are reused across warm invocations
_client_factory: Optional[RegionalClientFactory] = None


def get_client_factory(config: Settings) -> RegionalClientFactory:
    global _client_factory
    if _client_factory is None:
        _client_factory = RegionalClientFactory(config)
    return _client_factory


def _parse_model(data: dict[str, Any] | None) -> ResourceModel | None:
    if data is None:
        return None
    return ResourceModel.model_validate(data)


def handle_request(
    event: dict[str, Any],
    client: AccessAnalyzerClient | None = None,
    config: Settings | None = None,
) -> dict[str, Any]:
    """
    Decode an envelope, run the requested lifecycle action and encode the outcome.

    Args:
        event: Invocation envelope
        client: Client to use instead of one from the regional factory
        config: Settings to use instead of the global settings

    Returns:
        ProgressEvent in wire form
    """
    config = config or settings()
    with correlation_scope(event.get("clientRequestToken")) as request_token:
        return _dispatch(event, request_token, client, config).to_wire()


def _dispatch(
    event: dict[str, Any],
    request_token: str,
    client: AccessAnalyzerClient | None,
    config: Settings,
) -> ProgressEvent:
    raw_action = str(event.get("action") or "").upper()
    try:
        action = Action(raw_action)
    except ValueError:
        logger.warning(f"Rejected envelope with unknown action {raw_action!r}")
        return ProgressEvent.failed(HandlerErrorCode.INVALID_REQUEST, f"Unknown action: {raw_action!r}")

    try:
        desired = _parse_model(event.get("desiredResourceState"))
        previous = _parse_model(event.get("previousResourceState"))
    except ValidationError as e:
        logger.warning(f"Rejected {action.value} envelope with invalid model: {e.error_count()} errors")
        return ProgressEvent.failed(HandlerErrorCode.INVALID_REQUEST, f"Invalid resource model: {e}")

    client = client or get_client_factory(config).get_client(event.get("region"))
    reconciler = AnalyzerReconciler(client, config)
    logger.info(f"Handling {action.value} request")

    if action == Action.CREATE:
        if desired is None:
            return ProgressEvent.failed(
                HandlerErrorCode.INVALID_REQUEST, "CREATE requires a desired resource state"
            )
        return reconciler.create(desired, event.get("logicalResourceIdentifier"), request_token)
    if action == Action.READ:
        return reconciler.read(desired or ResourceModel())
    if action == Action.UPDATE:
        return reconciler.update(previous or ResourceModel(), desired or ResourceModel())
    if action == Action.DELETE:
        return reconciler.delete(desired or ResourceModel())
    return reconciler.list_resources(desired, event.get("nextToken"))
