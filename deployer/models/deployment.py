"""Deployment data models."""

from pathlib import Path
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models exchanged with the browser (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeploymentRequest(WireModel):
    """Request to clone a repository and sync it into a bucket.

    Every string field is required and non-empty by the time the
    orchestrator runs; fields may be filled from a draft first.
    """

    git_url: str = ""
    branch: str = ""
    bucket_name: str = ""
    access_key_id: str = Field(default="", repr=False)
    secret_access_key: str = Field(default="", repr=False)
    region: str = ""

    github_token: str | None = Field(default=None, repr=False)
    publish_workflow: bool = False
    draft_id: UUID | None = None

    def missing_fields(self) -> list[str]:
        """Return the wire names of required fields that are empty."""
        required = (
            "git_url",
            "branch",
            "bucket_name",
            "access_key_id",
            "secret_access_key",
            "region",
        )
        return [
            to_camel(name)
            for name in required
            if not str(getattr(self, name) or "").strip()
        ]


class WorkingCopy(BaseModel):
    """A local checkout of a remote repository."""

    path: Path
    branch: str
    commit: str = ""


class FileEntry(BaseModel):
    """A regular file found while walking a working copy."""

    relative_path: str
    absolute_path: Path
    content_type: str


class UploadResult(BaseModel):
    """Outcome of uploading a single file."""

    key: str
    succeeded: bool
    error_detail: str | None = None


class SyncReport(BaseModel):
    """Per-file outcomes of one directory sync, in traversal order."""

    bucket_name: str
    results: list[UploadResult] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(r.succeeded for r in self.results)

    @property
    def uploaded_keys(self) -> list[str]:
        return [r.key for r in self.results if r.succeeded]

    @property
    def failed(self) -> dict[str, str]:
        return {
            r.key: r.error_detail or "unknown error"
            for r in self.results
            if not r.succeeded
        }


class DeploymentResult(BaseModel):
    """Result of a deployment."""

    success: bool
    uploaded_keys: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)
    entry_url: str | None = None

    commit: str = ""
    workflow_published: bool = False
    duration_ms: int = 0

    error: str | None = None
