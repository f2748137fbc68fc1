"""Custom exceptions for the deployer."""

import re
from enum import Enum
from typing import Any


class DeployerError(Exception):
    """Base exception for the deployer."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def code(self) -> str:
        """Machine-readable code, e.g. ``FETCH_ERROR``."""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", type(self).__name__).upper()


class ValidationError(DeployerError):
    """Missing or malformed request fields."""

    status_code = 400

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        invalid: list[str] | None = None,
    ):
        details = {}
        if missing:
            details["missing"] = missing
        if invalid:
            details["invalid"] = invalid
        super().__init__(message, details)


class UnauthorizedError(DeployerError):
    """The provider rejected the supplied credential."""

    status_code = 401


class NotFoundError(DeployerError):
    """Repository, owner or draft does not exist."""

    status_code = 404


class UpstreamUnavailableError(DeployerError):
    """Remote API or network is degraded."""

    pass


class StorageConnectionError(DeployerError):
    """The object store could not be reached with the given credential."""

    def __init__(self, message: str, provider_message: str):
        super().__init__(message, {"provider_message": provider_message})


class OperationTimeoutError(DeployerError):
    """A bounded network call exceeded its deadline."""

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            f"{operation} timed out after {timeout_seconds:g}s",
            {"operation": operation, "timeout_seconds": timeout_seconds},
        )


class FetchError(DeployerError):
    """Clone, pull or checkout failed."""

    def __init__(self, message: str, source: str | None = None, branch: str | None = None):
        details = {}
        if source:
            details["source"] = source
        if branch:
            details["branch"] = branch
        super().__init__(f"Fetch failed: {message}", details)


class PublishReason(str, Enum):
    """Why publishing a file back to the repository failed."""

    NOTHING_TO_COMMIT = "nothing_to_commit"
    PUSH_REJECTED = "push_rejected"
    AUTHENTICATION_FAILED = "authentication_failed"
    UNKNOWN = "unknown"


class PublishError(DeployerError):
    """Commit or push failed."""

    def __init__(self, reason: PublishReason, message: str):
        super().__init__(f"Publish failed: {message}", {"reason": reason.value})
        self.reason = reason


class PartialUploadFailure(DeployerError):
    """Some files failed to upload to the bucket."""

    def __init__(self, uploaded: list[str], failed: dict[str, str]):
        super().__init__(
            f"{len(failed)} of {len(uploaded) + len(failed)} files failed to upload",
            {"uploaded": uploaded, "failed": failed},
        )
        self.uploaded = uploaded
        self.failed = failed
