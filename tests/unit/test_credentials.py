"""Unit tests for credential validation."""

from unittest.mock import MagicMock

import httpx
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from deployer.config import Settings
from deployer.core.exceptions import (
    NotFoundError,
    OperationTimeoutError,
    StorageConnectionError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)
from deployer.services.credentials import CredentialValidator
from deployer.services.storage import StorageCredential

REPO_PAYLOAD = {
    "id": 1,
    "full_name": "octocat/hello-world",
    "clone_url": "https://github.com/octocat/hello-world.git",
    "default_branch": "main",
    "private": False,
}


def _validator(handler=None, s3_client=None) -> tuple[CredentialValidator, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if handler is None:
            return httpx.Response(200, json=REPO_PAYLOAD)
        return handler(request)

    validator = CredentialValidator(
        config=Settings(github_api_url="https://api.github.test"),
        transport=httpx.MockTransport(record),
        s3_client_factory=lambda credential: s3_client,
    )
    return validator, seen


class TestValidateSourceCredential:
    """Tests for GitHub token validation."""

    async def test_returns_payload_verbatim(self):
        validator, seen = _validator()

        data = await validator.validate_source_credential("tok", "octocat", "hello-world")

        assert data == REPO_PAYLOAD
        assert len(seen) == 1
        assert seen[0].url == "https://api.github.test/repos/octocat/hello-world"
        assert seen[0].headers["Authorization"] == "Bearer tok"

    @pytest.mark.parametrize(
        "token,owner,repo",
        [("", "octocat", "hello"), ("tok", "", "hello"), ("tok", "octocat", " ")],
    )
    async def test_empty_arguments_make_no_request(self, token, owner, repo):
        validator, seen = _validator()

        with pytest.raises(ValidationError):
            await validator.validate_source_credential(token, owner, repo)

        assert seen == []

    @pytest.mark.parametrize(
        "owner,repo",
        [("octocat", "site/issues"), ("octo/cat", "site"), ("octocat", ".."), ("octocat", "a?b")],
    )
    async def test_malformed_names_make_no_request(self, owner, repo):
        validator, seen = _validator()

        with pytest.raises(ValidationError) as exc_info:
            await validator.validate_source_credential("tok", owner, repo)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["invalid"]
        assert seen == []

    async def test_non_object_payload_is_upstream_unavailable(self):
        validator, _ = _validator(lambda r: httpx.Response(200, json=[{"id": 1}]))

        with pytest.raises(UpstreamUnavailableError):
            await validator.validate_source_credential("tok", "octocat", "hello-world")

    async def test_unauthorized(self):
        validator, _ = _validator(lambda r: httpx.Response(401, json={"message": "Bad credentials"}))

        with pytest.raises(UnauthorizedError) as exc_info:
            await validator.validate_source_credential("bad", "octocat", "hello-world")

        assert exc_info.value.status_code == 401

    async def test_not_found(self):
        validator, _ = _validator(lambda r: httpx.Response(404, json={"message": "Not Found"}))

        with pytest.raises(NotFoundError):
            await validator.validate_source_credential("tok", "octocat", "missing")

    async def test_server_error_is_upstream_unavailable(self):
        validator, _ = _validator(lambda r: httpx.Response(503))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await validator.validate_source_credential("tok", "octocat", "hello-world")

        assert exc_info.value.details["status_code"] == 503

    async def test_connection_error_is_upstream_unavailable(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        validator, _ = _validator(refuse)

        with pytest.raises(UpstreamUnavailableError):
            await validator.validate_source_credential("tok", "octocat", "hello-world")

    async def test_timeout(self):
        def stall(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        validator, _ = _validator(stall)

        with pytest.raises(OperationTimeoutError):
            await validator.validate_source_credential("tok", "octocat", "hello-world")


class TestValidateStorageCredential:
    """Tests for AWS key validation."""

    async def test_returns_bucket_list(self):
        client = MagicMock()
        buckets = [{"Name": "site", "CreationDate": "2024-01-01T00:00:00Z"}]
        client.list_buckets.return_value = {"Buckets": buckets, "Owner": {"ID": "x"}}
        validator, _ = _validator(s3_client=client)

        result = await validator.validate_storage_credential("AKIA", "secret", "us-east-1")

        assert result == buckets
        client.list_buckets.assert_called_once_with()

    async def test_builds_client_from_request_credential(self):
        received: list[StorageCredential] = []
        client = MagicMock()
        client.list_buckets.return_value = {"Buckets": []}

        def factory(credential: StorageCredential):
            received.append(credential)
            return client

        validator = CredentialValidator(s3_client_factory=factory)
        await validator.validate_storage_credential("AKIA", "secret", "eu-west-1")

        assert received == [StorageCredential("AKIA", "secret", "eu-west-1")]

    async def test_invalid_keys(self):
        client = MagicMock()
        client.list_buckets.side_effect = ClientError(
            {"Error": {"Code": "InvalidAccessKeyId", "Message": "The key does not exist"}},
            "ListBuckets",
        )
        validator, _ = _validator(s3_client=client)

        with pytest.raises(StorageConnectionError) as exc_info:
            await validator.validate_storage_credential("AKIA", "bad", "us-east-1")

        assert exc_info.value.message == "AWS Connection Failed."
        assert exc_info.value.details["provider_message"] == "The key does not exist"

    async def test_network_failure(self):
        client = MagicMock()
        client.list_buckets.side_effect = EndpointConnectionError(
            endpoint_url="https://s3.amazonaws.com"
        )
        validator, _ = _validator(s3_client=client)

        with pytest.raises(StorageConnectionError):
            await validator.validate_storage_credential("AKIA", "secret", "us-east-1")

    async def test_missing_fields(self):
        client = MagicMock()
        validator, _ = _validator(s3_client=client)

        with pytest.raises(ValidationError) as exc_info:
            await validator.validate_storage_credential("AKIA", "", "")

        assert exc_info.value.details["missing"] == ["secretAccessKey", "region"]
        client.list_buckets.assert_not_called()


class TestCreateBucket:
    """Tests for bucket creation."""

    async def test_us_east_1_has_no_location_constraint(self):
        client = MagicMock()
        client.create_bucket.return_value = {"Location": "/site"}
        validator, _ = _validator(s3_client=client)

        location = await validator.create_bucket(
            StorageCredential("AKIA", "secret", "us-east-1"), "site"
        )

        assert location == "/site"
        client.create_bucket.assert_called_once_with(Bucket="site")

    async def test_other_regions_set_location_constraint(self):
        client = MagicMock()
        client.create_bucket.return_value = {}
        validator, _ = _validator(s3_client=client)

        await validator.create_bucket(StorageCredential("AKIA", "secret", "eu-west-1"), "site")

        client.create_bucket.assert_called_once_with(
            Bucket="site",
            CreateBucketConfiguration={"LocationConstraint": "eu-west-1"},
        )

    async def test_failure(self):
        client = MagicMock()
        client.create_bucket.side_effect = ClientError(
            {"Error": {"Code": "BucketAlreadyExists", "Message": "Bucket exists"}},
            "CreateBucket",
        )
        validator, _ = _validator(s3_client=client)

        with pytest.raises(StorageConnectionError) as exc_info:
            await validator.create_bucket(StorageCredential("AKIA", "secret", "us-east-1"), "site")

        assert "Bucket exists" in exc_info.value.message
