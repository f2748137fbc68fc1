"""Credential validation request and response models."""

from typing import Any
from uuid import UUID

from pydantic import Field

from deployer.models.deployment import WireModel


class GitHubCredentialRequest(WireModel):
    """Step one of the wizard: a GitHub token and the repository it should reach."""

    token: str = Field(default="", repr=False)
    username: str = ""
    repository: str = ""
    draft_id: UUID | None = None


class GitHubCredentialResponse(WireModel):
    """Successful GitHub validation."""

    message: str
    repository_data: dict[str, Any]
    draft_id: UUID


class AwsCredentialRequest(WireModel):
    """Step two of the wizard: an AWS key pair and region."""

    access_key_id: str = Field(default="", repr=False)
    secret_access_key: str = Field(default="", repr=False)
    region: str = ""
    draft_id: UUID | None = None


class AwsCredentialResponse(WireModel):
    """Successful AWS validation."""

    message: str
    buckets: list[dict[str, Any]]
    draft_id: UUID


class CreateBucketRequest(WireModel):
    """Create a bucket with the given credential."""

    access_key_id: str = Field(default="", repr=False)
    secret_access_key: str = Field(default="", repr=False)
    region: str = ""
    bucket_name: str = ""


class CreateBucketResponse(WireModel):
    """Bucket created."""

    message: str
    bucket_name: str
    location: str | None = None
