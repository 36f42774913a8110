# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Analyzer lifecycle driver.

Implements create, read, update, delete and list for a single analyzer. Each
call is stateless: everything it needs arrives as arguments, and remote calls
are made one at a time in a fixed order. A failed remote call ends the
invocation; applied changes are not rolled back and nothing is retried.
"""

import logging

from pydantic import ValidationError

from ..clients.access_analyzer_client import AccessAnalyzerAPIError, AccessAnalyzerClient
from ..config import Settings
from ..models import (
    HandlerErrorCode,
    OpAction,
    ProgressEvent,
    RemoteErrorKind,
    RemoteOp,
    ResourceModel,
)
from ..utils.resource_utils import (
    analyzer_summary_to_model,
    configuration_from_api,
    configuration_to_api,
    map_to_tags,
    rule_filter_map,
    rule_from_summary,
    rule_to_inline,
    tags_to_map,
)
from .differ import diff_rules, diff_tags
from .error_classifier import InternalFailureError, classify_error
from .identity import existing_name, resolve_name
from .paginator import paginate
from .planner import plan

logger = logging.getLogger(__name__)

TYPE_NAME = "AWS::AccessAnalyzer::Analyzer"
NO_ANALYZER_MESSAGE_PREFIX = "No analyzer named "


class AnalyzerReconciler:
    """
    Reconciles the declared state of an analyzer against the service.

    Orchestrates name resolution, diffing and planning, issues the remote
    calls and translates their results and failures into ProgressEvents.
    Outcomes are returned, never raised.
    """

    def __init__(
        self,
        client: AccessAnalyzerClient,
        config: Settings | None = None,
        log: logging.Logger | None = None,
    ):
        """
        Initialize the reconciler.

        Args:
            client: Access Analyzer client used for every remote call
            config: Reconciler settings (defaults when omitted)
            log: Logger receiving progress lines (module logger when omitted)
        """
        self.client = client
        self.config = config or Settings()
        self.log = log or logger

    def _internal_failure(self, message: str) -> ProgressEvent:
        self.log.error(f"Impossible: {message}")
        return ProgressEvent.failed(HandlerErrorCode.INTERNAL_FAILURE, "Internal error")

    def _undecodable(self, context: str, error: ValidationError) -> ProgressEvent:
        # Remote state the models cannot represent, e.g. an analyzer type added
        # to the service after this release.
        self.log.warning(f"{context} returned undecodable state: {error.error_count()} errors")
        return ProgressEvent.failed(
            HandlerErrorCode.SERVICE_INTERNAL_ERROR,
            f"Unrecognised analyzer state from service: {error.errors()[0]['msg']}",
        )

    def create(
        self, desired: ResourceModel, logical_id: str | None, request_token: str
    ) -> ProgressEvent:
        """
        Create an analyzer with its archive rules and tags.

        Invents a name from the logical id and request token when the model
        has none. The service must return an ARN; a missing one is an
        internal failure.
        """
        name, model = resolve_name(
            desired, logical_id, request_token, self.config.analyzer_name_max_length
        )
        if not desired.name:
            self.log.info(f"No name in request. Invented name: {name}")

        try:
            arn = self.client.create_analyzer(
                name=name,
                analyzer_type=model.kind.value if model.kind else None,
                archive_rules=[rule_to_inline(rule) for rule in model.rules or ()],
                tags=tags_to_map(model.tags),
                configuration=configuration_to_api(model),
            )
        except AccessAnalyzerAPIError as e:
            error_code = classify_error(e)
            self.log.warning(f"{TYPE_NAME} [{name}] Create failed ({error_code.value}): {e.message}")
            return ProgressEvent.failed(error_code, e.message)

        if not arn:
            return self._internal_failure(f"empty ARN from create of {name}")

        self.log.info(f"{TYPE_NAME} [{name}] Created Successfully")
        return ProgressEvent.success(model.model_copy(update={"arn": arn}))

    def read(self, model: ResourceModel) -> ProgressEvent:
        """
        Read the full state of an analyzer, including every archive rule page.
        """
        if not model.arn:
            return self._internal_failure("null ARN in current state of analyzer")
        try:
            name = existing_name(model)
        except InternalFailureError as e:
            return self._internal_failure(str(e))

        try:
            analyzer = self.client.get_analyzer(name)
            summaries = paginate(
                {"name": name, "next_token": None},
                lambda request: self.client.list_archive_rules(
                    request["name"], request["next_token"]
                ),
            )
        except AccessAnalyzerAPIError as e:
            if e.kind == RemoteErrorKind.RESOURCE_NOT_FOUND:
                message = NO_ANALYZER_MESSAGE_PREFIX + name
                self.log.info(message)
                return ProgressEvent.failed(HandlerErrorCode.NOT_FOUND, message)
            error_code = classify_error(e)
            self.log.warning(f"{TYPE_NAME} [{name}] Read failed ({error_code.value}): {e.message}")
            return ProgressEvent.failed(error_code, e.message)

        try:
            result = ResourceModel(
                name=name,
                arn=analyzer.get("arn") or model.arn,
                kind=analyzer.get("type"),
                tags=map_to_tags(analyzer.get("tags")),
                rules=[rule_from_summary(summary) for summary in summaries],
            )
        except ValidationError as e:
            return self._undecodable(f"{TYPE_NAME} [{name}] Read", e)

        configuration = configuration_from_api(result.kind, analyzer.get("configuration"))
        if configuration is not None:
            result = result.model_copy(update={"configuration": configuration})
        return ProgressEvent.success(result)

    def update(self, previous: ResourceModel, desired: ResourceModel) -> ProgressEvent:
        """
        Converge an analyzer's tags and archive rules on the desired state.

        The name and kind cannot change. The returned model is the desired
        state with the ARN filled in; the analyzer is not read back.
        """
        arn = previous.arn
        if not arn:
            return self._internal_failure("null ARN in previous state of analyzer")
        try:
            name = existing_name(previous)
        except InternalFailureError as e:
            return self._internal_failure(str(e))

        if desired.name is None:
            self.log.info(f"Setting new analyzer name to {name}")
            desired = desired.model_copy(update={"name": name})

        if desired.name != name:
            return ProgressEvent.failed(
                HandlerErrorCode.NOT_UPDATABLE,
                f"{TYPE_NAME} [{name}] cannot be modified as AnalyzerName was changed",
            )
        if desired.kind != previous.kind:
            return ProgressEvent.failed(
                HandlerErrorCode.NOT_UPDATABLE,
                f"{TYPE_NAME} [{name}] cannot be modified as Type was changed",
            )

        desired = desired.model_copy(update={"arn": arn})
        ops = plan(
            diff_tags(previous.tags, desired.tags),
            diff_rules(previous.rules, desired.rules),
        )

        try:
            for op in ops:
                self.log.info(f"Applying {op.describe()} for analyzer {name}")
                self._apply(op, name, arn)
        except AccessAnalyzerAPIError as e:
            if e.kind == RemoteErrorKind.RESOURCE_NOT_FOUND:
                message = f"{TYPE_NAME} [{name}] not found and must be created"
                self.log.info(message)
                return ProgressEvent.failed(HandlerErrorCode.NOT_FOUND, message)
            error_code = classify_error(e)
            self.log.warning(f"{TYPE_NAME} [{name}] Update failed ({error_code.value}): {e.message}")
            return ProgressEvent.failed(error_code, e.message)

        self.log.info(f"{TYPE_NAME} [{name}] Updated Successfully ({len(ops)} changes)")
        return ProgressEvent.success(desired)

    def _apply(self, op: RemoteOp, name: str, arn: str) -> None:
        if op.action == OpAction.UNTAG:
            self.client.untag_resource(arn, list(op.tag_keys))
        elif op.action == OpAction.TAG:
            self.client.tag_resource(arn, tags_to_map(op.tags))
        elif op.action == OpAction.DELETE_RULE:
            self.client.delete_archive_rule(name, op.rule_name)
        elif op.action == OpAction.CREATE_RULE:
            self.client.create_archive_rule(name, op.rule_name, rule_filter_map(op.rule))
        elif op.action == OpAction.UPDATE_RULE:
            self.client.update_archive_rule(name, op.rule_name, rule_filter_map(op.rule))

    def delete(self, model: ResourceModel) -> ProgressEvent:
        """
        Delete an analyzer.

        Never returns a model, whatever the outcome. A not-found from the
        service is reported as NotFound rather than treated as success.
        """
        if not model.arn:
            return self._internal_failure("null ARN in current state of analyzer")
        try:
            name = existing_name(model)
        except InternalFailureError as e:
            return self._internal_failure(str(e))

        try:
            self.client.delete_analyzer(name)
        except AccessAnalyzerAPIError as e:
            error_code = classify_error(e)
            self.log.warning(
                f"Exception while deleting {TYPE_NAME} named {name}: {e.error_code or e.kind.value}"
            )
            if error_code == HandlerErrorCode.NOT_FOUND:
                return ProgressEvent.failed(error_code, NO_ANALYZER_MESSAGE_PREFIX + name)
            return ProgressEvent.failed(error_code, e.message)

        self.log.info(f"{TYPE_NAME} [{name}] Deleted Successfully")
        return ProgressEvent.success(None)

    def list_resources(
        self, model: ResourceModel | None = None, next_token: str | None = None
    ) -> ProgressEvent:
        """
        List every analyzer in the account and region.

        Starts from ``next_token`` when given and follows continuation tokens
        to the end, so the returned token is always None.
        """
        try:
            summaries = paginate(
                {"next_token": next_token},
                lambda request: self.client.list_analyzers(
                    request["next_token"], self.config.list_max_results
                ),
            )
        except AccessAnalyzerAPIError as e:
            error_code = classify_error(e)
            self.log.warning(f"{TYPE_NAME} List failed ({error_code.value}): {e.message}")
            return ProgressEvent.failed(error_code, e.message)

        try:
            models = [analyzer_summary_to_model(summary) for summary in summaries]
        except ValidationError as e:
            return self._undecodable(f"{TYPE_NAME} List", e)
        return ProgressEvent.success_list(models, next_token=None)
