"""Core functionality for the deployer."""

from deployer.core.exceptions import (
    DeployerError,
    FetchError,
    NotFoundError,
    OperationTimeoutError,
    PartialUploadFailure,
    PublishError,
    PublishReason,
    StorageConnectionError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)
from deployer.core.drafts import DraftManager, get_draft_manager
from deployer.core.orchestrator import DeploymentOrchestrator, get_orchestrator
from deployer.core.workspace import working_directory

__all__ = [
    "DeployerError",
    "FetchError",
    "NotFoundError",
    "OperationTimeoutError",
    "PartialUploadFailure",
    "PublishError",
    "PublishReason",
    "StorageConnectionError",
    "UnauthorizedError",
    "UpstreamUnavailableError",
    "ValidationError",
    "DraftManager",
    "get_draft_manager",
    "DeploymentOrchestrator",
    "get_orchestrator",
    "working_directory",
]
