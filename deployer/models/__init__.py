"""Data models for the deployer."""

from deployer.models.credentials import (
    AwsCredentialRequest,
    AwsCredentialResponse,
    CreateBucketRequest,
    CreateBucketResponse,
    GitHubCredentialRequest,
    GitHubCredentialResponse,
)
from deployer.models.deployment import (
    DeploymentRequest,
    DeploymentResult,
    FileEntry,
    SyncReport,
    UploadResult,
    WireModel,
    WorkingCopy,
)
from deployer.models.draft import (
    AwsStep,
    DeploymentDraft,
    DraftSummary,
    GitHubStep,
)

__all__ = [
    # Credential models
    "GitHubCredentialRequest",
    "GitHubCredentialResponse",
    "AwsCredentialRequest",
    "AwsCredentialResponse",
    "CreateBucketRequest",
    "CreateBucketResponse",
    # Deployment models
    "WireModel",
    "DeploymentRequest",
    "DeploymentResult",
    "WorkingCopy",
    "FileEntry",
    "UploadResult",
    "SyncReport",
    # Draft models
    "DeploymentDraft",
    "DraftSummary",
    "GitHubStep",
    "AwsStep",
]
