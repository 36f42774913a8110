"""Unit tests for the analyzer lifecycle driver."""

import re
from unittest.mock import call

import pytest

from analyzer_reconciler.config import Settings
from analyzer_reconciler.models import (
    AnalyzerConfiguration,
    AnalyzerType,
    HandlerErrorCode,
    OperationStatus,
    RemoteErrorKind,
    ResourceModel,
    Tag,
    UnusedAccessConfiguration,
)
from analyzer_reconciler.services import AnalyzerReconciler

from conftest import (
    ANALYZER_ARN,
    ANALYZER_NAME,
    CLIENT_REQUEST_TOKEN,
    LOGICAL_RESOURCE_ID,
    api_error,
    make_rule,
    make_tags,
)


@pytest.fixture
def reconciler(mock_client, quiet_logger):
    return AnalyzerReconciler(mock_client, Settings(_env_file=None), log=quiet_logger)


def unused_access_model(**fields) -> ResourceModel:
    return ResourceModel(
        kind=AnalyzerType.ACCOUNT_UNUSED_ACCESS,
        configuration=AnalyzerConfiguration(
            unused_access_configuration=UnusedAccessConfiguration(unused_access_age=60)
        ),
        **fields,
    )


# =============================================================================
# Create
# =============================================================================


class TestCreate:
    """Test analyzer creation."""

    def test_create_without_name_invents_one(self, reconciler, mock_client):
        desired = ResourceModel(kind=AnalyzerType.ACCOUNT)

        event = reconciler.create(desired, LOGICAL_RESOURCE_ID, CLIENT_REQUEST_TOKEN)

        assert event.status == OperationStatus.SUCCESS
        name = event.resource_model.name
        assert re.fullmatch(r"MyAnalyzer-[A-Za-z0-9]{12}", name)
        assert len(name) <= 255
        assert event.resource_model.arn == ANALYZER_ARN
        assert mock_client.create_analyzer.call_args.kwargs["name"] == name
        assert event.error_code is None
        assert event.message is None

    def test_create_with_name(self, reconciler, mock_client):
        desired = ResourceModel(
            name=ANALYZER_NAME,
            kind=AnalyzerType.ACCOUNT,
            tags=make_tags(env="prod"),
            rules=[make_rule("ArchiveOwnAccount")],
        )

        event = reconciler.create(desired, LOGICAL_RESOURCE_ID, CLIENT_REQUEST_TOKEN)

        assert event.succeeded
        assert event.resource_model == desired.model_copy(update={"arn": ANALYZER_ARN})
        mock_client.create_analyzer.assert_called_once_with(
            name=ANALYZER_NAME,
            analyzer_type="ACCOUNT",
            archive_rules=[
                {
                    "ruleName": "ArchiveOwnAccount",
                    "filter": {"principal.AWS": {"eq": ["111111111111"]}},
                }
            ],
            tags={"env": "prod"},
            configuration=None,
        )

    def test_create_unused_access_sends_configuration(self, reconciler, mock_client):
        desired = unused_access_model(name=ANALYZER_NAME)

        event = reconciler.create(desired, LOGICAL_RESOURCE_ID, CLIENT_REQUEST_TOKEN)

        assert event.succeeded
        assert mock_client.create_analyzer.call_args.kwargs["configuration"] == {
            "unusedAccess": {"unusedAccessAge": 60}
        }
        assert event.resource_model.configuration == desired.configuration

    def test_create_empty_arn_is_internal_failure(self, reconciler, mock_client):
        mock_client.create_analyzer.return_value = None

        event = reconciler.create(
            ResourceModel(kind=AnalyzerType.ACCOUNT), LOGICAL_RESOURCE_ID, CLIENT_REQUEST_TOKEN
        )

        assert event.status == OperationStatus.FAILED
        assert event.error_code == HandlerErrorCode.INTERNAL_FAILURE
        assert event.resource_model is None

    @pytest.mark.parametrize(
        "error, expected",
        [
            (api_error(RemoteErrorKind.SERVICE_QUOTA_EXCEEDED, 402), HandlerErrorCode.SERVICE_LIMIT_EXCEEDED),
            (api_error(RemoteErrorKind.ACCESS_DENIED, 403), HandlerErrorCode.ACCESS_DENIED),
            (api_error(RemoteErrorKind.UNKNOWN, 400), HandlerErrorCode.INVALID_REQUEST),
            (api_error(RemoteErrorKind.UNKNOWN, 500), HandlerErrorCode.SERVICE_INTERNAL_ERROR),
        ],
    )
    def test_create_failures(self, reconciler, mock_client, error, expected):
        mock_client.create_analyzer.side_effect = error

        event = reconciler.create(
            ResourceModel(name=ANALYZER_NAME, kind=AnalyzerType.ACCOUNT),
            LOGICAL_RESOURCE_ID,
            CLIENT_REQUEST_TOKEN,
        )

        assert event.status == OperationStatus.FAILED
        assert event.error_code == expected
        assert event.message == "boom"
        assert event.resource_model is None


# =============================================================================
# Read
# =============================================================================


class TestRead:
    """Test reading an analyzer back."""

    def test_read_reconstructs_model(self, reconciler, mock_client):
        mock_client.get_analyzer.return_value = {
            "arn": ANALYZER_ARN,
            "name": ANALYZER_NAME,
            "type": "ACCOUNT",
            "tags": {"b": "2", "a": "1"},
        }
        mock_client.list_archive_rules.side_effect = [
            ([{"ruleName": "R1", "filter": {"isPublic": {"exists": True}}}], "t1"),
            ([{"ruleName": "R2", "filter": {"resourceType": {"eq": ["AWS::S3::Bucket"]}}}], None),
        ]

        event = reconciler.read(ResourceModel(arn=ANALYZER_ARN))

        assert event.succeeded
        model = event.resource_model
        assert model.name == ANALYZER_NAME
        assert model.arn == ANALYZER_ARN
        assert model.kind == AnalyzerType.ACCOUNT
        assert model.tags == [Tag(key="a", value="1"), Tag(key="b", value="2")]
        assert [rule.rule_name for rule in model.rules] == ["R1", "R2"]
        assert model.rules[0].filters[0].exists is True
        assert model.configuration is None
        mock_client.get_analyzer.assert_called_once_with(ANALYZER_NAME)
        assert mock_client.list_archive_rules.call_args_list == [
            call(ANALYZER_NAME, None),
            call(ANALYZER_NAME, "t1"),
        ]

    def test_read_unused_access_configuration(self, reconciler, mock_client):
        mock_client.get_analyzer.return_value = {
            "arn": ANALYZER_ARN,
            "type": "ACCOUNT_UNUSED_ACCESS",
            "configuration": {"unusedAccess": {"unusedAccessAge": 90}},
        }

        event = reconciler.read(ResourceModel(name=ANALYZER_NAME, arn=ANALYZER_ARN))

        configuration = event.resource_model.configuration
        assert configuration.unused_access_configuration.unused_access_age == 90

    def test_read_internal_access_analyzer(self, reconciler, mock_client):
        mock_client.get_analyzer.return_value = {
            "arn": ANALYZER_ARN,
            "type": "ORGANIZATION_INTERNAL_ACCESS",
        }

        event = reconciler.read(ResourceModel(arn=ANALYZER_ARN))

        assert event.succeeded
        assert event.resource_model.kind == AnalyzerType.ORGANIZATION_INTERNAL_ACCESS
        assert event.resource_model.configuration is None

    def test_read_unrecognised_type_is_service_error(self, reconciler, mock_client):
        mock_client.get_analyzer.return_value = {"arn": ANALYZER_ARN, "type": "SOME_FUTURE_KIND"}

        event = reconciler.read(ResourceModel(arn=ANALYZER_ARN))

        assert event.status == OperationStatus.FAILED
        assert event.error_code == HandlerErrorCode.SERVICE_INTERNAL_ERROR
        assert event.resource_model is None

    def test_read_not_found(self, reconciler, mock_client):
        mock_client.get_analyzer.side_effect = api_error(RemoteErrorKind.RESOURCE_NOT_FOUND, 404)

        event = reconciler.read(ResourceModel(arn=ANALYZER_ARN))

        assert event.error_code == HandlerErrorCode.NOT_FOUND
        assert event.message == f"No analyzer named {ANALYZER_NAME}"

    def test_read_not_found_while_listing_rules(self, reconciler, mock_client):
        mock_client.list_archive_rules.side_effect = api_error(
            RemoteErrorKind.RESOURCE_NOT_FOUND, 404
        )

        event = reconciler.read(ResourceModel(arn=ANALYZER_ARN))

        assert event.error_code == HandlerErrorCode.NOT_FOUND

    def test_read_access_denied(self, reconciler, mock_client):
        mock_client.get_analyzer.side_effect = api_error(RemoteErrorKind.ACCESS_DENIED, 403)
        event = reconciler.read(ResourceModel(arn=ANALYZER_ARN))
        assert event.error_code == HandlerErrorCode.ACCESS_DENIED

    def test_read_without_arn_is_internal_failure(self, reconciler, mock_client):
        event = reconciler.read(ResourceModel(name=ANALYZER_NAME))

        assert event.error_code == HandlerErrorCode.INTERNAL_FAILURE
        mock_client.get_analyzer.assert_not_called()

    def test_read_malformed_arn_is_internal_failure(self, reconciler, mock_client):
        event = reconciler.read(ResourceModel(arn="arn:aws:s3:::bucket"))

        assert event.error_code == HandlerErrorCode.INTERNAL_FAILURE
        mock_client.get_analyzer.assert_not_called()


# =============================================================================
# Update
# =============================================================================


class TestUpdate:
    """Test converging an existing analyzer."""

    def test_tag_changes_issue_two_calls(self, reconciler, mock_client, existing_model):
        previous = existing_model.model_copy(update={"tags": make_tags(a="1", b="7", z="5")})
        desired = previous.model_copy(update={"tags": make_tags(a="1", b="2", c="3"), "arn": None})

        event = reconciler.update(previous, desired)

        assert event.succeeded
        assert mock_client.mock_calls == [
            call.untag_resource(ANALYZER_ARN, ["z"]),
            call.tag_resource(ANALYZER_ARN, {"b": "2", "c": "3"}),
        ]
        assert event.resource_model.arn == ANALYZER_ARN
        assert event.resource_model.tags == desired.tags

    def test_rule_changes_in_order(self, reconciler, mock_client, existing_model):
        previous = existing_model.model_copy(
            update={"tags": None, "rules": [make_rule("Drop"), make_rule("Change", "1")]}
        )
        desired = previous.model_copy(
            update={"rules": [make_rule("New", "9"), make_rule("Change", "2")]}
        )

        event = reconciler.update(previous, desired)

        assert event.succeeded
        assert mock_client.mock_calls == [
            call.delete_archive_rule(ANALYZER_NAME, "Drop"),
            call.create_archive_rule(ANALYZER_NAME, "New", {"principal.AWS": {"eq": ["9"]}}),
            call.update_archive_rule(ANALYZER_NAME, "Change", {"principal.AWS": {"eq": ["2"]}}),
        ]

    def test_no_changes_no_calls(self, reconciler, mock_client, existing_model):
        event = reconciler.update(existing_model, existing_model)

        assert event.succeeded
        assert mock_client.mock_calls == []
        assert event.resource_model == existing_model

    def test_name_change_is_not_updatable(self, reconciler, mock_client, existing_model):
        desired = existing_model.model_copy(update={"name": "Renamed"})

        event = reconciler.update(existing_model, desired)

        assert event.error_code == HandlerErrorCode.NOT_UPDATABLE
        assert "AnalyzerName" in event.message
        assert mock_client.mock_calls == []

    def test_type_change_is_not_updatable(self, reconciler, mock_client, existing_model):
        desired = existing_model.model_copy(update={"kind": AnalyzerType.ORGANIZATION})

        event = reconciler.update(existing_model, desired)

        assert event.error_code == HandlerErrorCode.NOT_UPDATABLE
        assert "Type" in event.message
        assert mock_client.mock_calls == []

    def test_missing_desired_name_uses_existing(self, reconciler, mock_client, existing_model):
        previous = existing_model.model_copy(update={"name": None})
        desired = existing_model.model_copy(update={"name": None, "tags": make_tags(a="1")})

        event = reconciler.update(previous, desired)

        assert event.succeeded
        assert event.resource_model.name == ANALYZER_NAME
        mock_client.untag_resource.assert_called_once_with(ANALYZER_ARN, ["b"])

    def test_without_arn_is_internal_failure(self, reconciler, mock_client, existing_model):
        previous = existing_model.model_copy(update={"arn": None})

        event = reconciler.update(previous, existing_model)

        assert event.error_code == HandlerErrorCode.INTERNAL_FAILURE
        assert mock_client.mock_calls == []

    def test_not_found_mid_plan_stops(self, reconciler, mock_client, existing_model):
        mock_client.delete_archive_rule.side_effect = api_error(
            RemoteErrorKind.RESOURCE_NOT_FOUND, 404
        )
        desired = existing_model.model_copy(
            update={"tags": make_tags(a="1", b="2"), "rules": [make_rule("New")]}
        )

        event = reconciler.update(existing_model, desired)

        assert event.error_code == HandlerErrorCode.NOT_FOUND
        assert "must be created" in event.message
        assert ANALYZER_NAME in event.message
        mock_client.tag_resource.assert_called_once()
        mock_client.create_archive_rule.assert_not_called()

    @pytest.mark.parametrize(
        "error, expected",
        [
            (api_error(RemoteErrorKind.SERVICE_QUOTA_EXCEEDED, 402), HandlerErrorCode.SERVICE_LIMIT_EXCEEDED),
            (api_error(RemoteErrorKind.VALIDATION, 400), HandlerErrorCode.INVALID_REQUEST),
            (api_error(RemoteErrorKind.UNKNOWN, 400), HandlerErrorCode.INVALID_REQUEST),
            (api_error(RemoteErrorKind.INTERNAL_SERVER, 500), HandlerErrorCode.SERVICE_INTERNAL_ERROR),
        ],
    )
    def test_update_failures(self, reconciler, mock_client, existing_model, error, expected):
        mock_client.tag_resource.side_effect = error
        desired = existing_model.model_copy(update={"tags": make_tags(a="1", b="2")})

        event = reconciler.update(existing_model, desired)

        assert event.error_code == expected
        assert event.resource_model is None


# =============================================================================
# Delete
# =============================================================================


class TestDelete:
    """Test analyzer deletion."""

    def test_delete_success_returns_no_model(self, reconciler, mock_client, existing_model):
        event = reconciler.delete(existing_model)

        assert event.succeeded
        assert event.resource_model is None
        mock_client.delete_analyzer.assert_called_once_with(ANALYZER_NAME)

    def test_delete_uses_name_from_arn(self, reconciler, mock_client):
        reconciler.delete(ResourceModel(arn=ANALYZER_ARN))
        mock_client.delete_analyzer.assert_called_once_with(ANALYZER_NAME)

    def test_delete_not_found_is_failure(self, reconciler, mock_client, existing_model):
        mock_client.delete_analyzer.side_effect = api_error(RemoteErrorKind.RESOURCE_NOT_FOUND, 404)

        event = reconciler.delete(existing_model)

        assert event.status == OperationStatus.FAILED
        assert event.error_code == HandlerErrorCode.NOT_FOUND
        assert event.message == f"No analyzer named {ANALYZER_NAME}"
        assert event.resource_model is None

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (RemoteErrorKind.ACCESS_DENIED, HandlerErrorCode.ACCESS_DENIED),
            (RemoteErrorKind.CONFLICT, HandlerErrorCode.INVALID_REQUEST),
            (RemoteErrorKind.VALIDATION, HandlerErrorCode.INVALID_REQUEST),
            (RemoteErrorKind.SERVICE_QUOTA_EXCEEDED, HandlerErrorCode.SERVICE_LIMIT_EXCEEDED),
            (RemoteErrorKind.THROTTLING, HandlerErrorCode.THROTTLING),
            (RemoteErrorKind.INTERNAL_SERVER, HandlerErrorCode.SERVICE_INTERNAL_ERROR),
            (RemoteErrorKind.UNKNOWN, HandlerErrorCode.SERVICE_INTERNAL_ERROR),
        ],
    )
    def test_delete_failures(self, reconciler, mock_client, existing_model, kind, expected):
        mock_client.delete_analyzer.side_effect = api_error(kind)

        event = reconciler.delete(existing_model)

        assert event.error_code == expected
        assert event.resource_model is None
        assert event.message

    def test_delete_without_arn_is_internal_failure(self, reconciler, mock_client):
        event = reconciler.delete(ResourceModel(name=ANALYZER_NAME))

        assert event.error_code == HandlerErrorCode.INTERNAL_FAILURE
        assert event.resource_model is None
        mock_client.delete_analyzer.assert_not_called()


# =============================================================================
# List
# =============================================================================


class TestList:
    """Test listing analyzers."""

    @staticmethod
    def summary(name: str, **tags: str) -> dict:
        return {
            "arn": f"arn:aws:access-analyzer:us-west-2:111111111111:analyzer/{name}",
            "name": name,
            "type": "ACCOUNT",
            "tags": tags,
            "status": "ACTIVE",
        }

    def test_list_accumulates_pages(self, reconciler, mock_client):
        mock_client.list_analyzers.side_effect = [
            ([self.summary("A1"), self.summary("A2"), self.summary("A3")], "t1"),
            ([self.summary("B1", team="x")], None),
        ]

        event = reconciler.list_resources(None, None)

        assert event.succeeded
        assert [model.name for model in event.resource_models] == ["A1", "A2", "A3", "B1"]
        assert event.resource_models[3].tags == [Tag(key="team", value="x")]
        assert event.next_token is None
        assert mock_client.list_analyzers.call_args_list == [call(None, 100), call("t1", 100)]

    def test_list_starts_from_token(self, reconciler, mock_client):
        reconciler.list_resources(None, "resume")
        mock_client.list_analyzers.assert_called_once_with("resume", 100)

    def test_list_empty(self, reconciler):
        event = reconciler.list_resources()
        assert event.resource_models == []

    def test_list_includes_internal_access_analyzers(self, reconciler, mock_client):
        mock_client.list_analyzers.return_value = (
            [
                {**self.summary("A1"), "type": "ACCOUNT_INTERNAL_ACCESS"},
                {**self.summary("A2"), "type": "ORGANIZATION_INTERNAL_ACCESS"},
            ],
            None,
        )

        event = reconciler.list_resources()

        assert event.succeeded
        assert [model.kind for model in event.resource_models] == [
            AnalyzerType.ACCOUNT_INTERNAL_ACCESS,
            AnalyzerType.ORGANIZATION_INTERNAL_ACCESS,
        ]

    def test_list_unrecognised_type_is_service_error(self, reconciler, mock_client):
        mock_client.list_analyzers.return_value = (
            [self.summary("A1"), {**self.summary("A2"), "type": "SOME_FUTURE_KIND"}],
            None,
        )

        event = reconciler.list_resources()

        assert event.error_code == HandlerErrorCode.SERVICE_INTERNAL_ERROR
        assert event.resource_models is None

    def test_list_access_denied(self, reconciler, mock_client):
        mock_client.list_analyzers.side_effect = api_error(RemoteErrorKind.ACCESS_DENIED, 403)

        event = reconciler.list_resources()

        assert event.error_code == HandlerErrorCode.ACCESS_DENIED
        assert event.resource_models is None
