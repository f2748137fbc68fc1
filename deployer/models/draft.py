"""Wizard draft models.

A draft carries validated input from the GitHub step to the AWS step and on
to the deploy request, keyed by an id the browser holds.
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from deployer.models.deployment import WireModel


class GitHubStep(BaseModel):
    """Validated GitHub credential."""

    token: str = Field(repr=False)
    username: str
    repository: str
    clone_url: str = ""
    default_branch: str = ""


class AwsStep(BaseModel):
    """Validated AWS credential."""

    access_key_id: str = Field(repr=False)
    secret_access_key: str = Field(repr=False)
    region: str


class DeploymentDraft(BaseModel):
    """Server-side state of one wizard run."""

    id: UUID = Field(default_factory=uuid4)
    github: GitHubStep | None = None
    aws: AwsStep | None = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class DraftSummary(WireModel):
    """Redacted view of a draft, safe to return to the browser."""

    draft_id: UUID
    github_validated: bool
    aws_validated: bool
    username: str | None = None
    repository: str | None = None
    clone_url: str | None = None
    default_branch: str | None = None
    region: str | None = None
    created_at: datetime

    @classmethod
    def from_draft(cls, draft: DeploymentDraft) -> "DraftSummary":
        summary = cls(
            draft_id=draft.id,
            github_validated=draft.github is not None,
            aws_validated=draft.aws is not None,
            created_at=draft.created_at,
        )
        if draft.github:
            summary.username = draft.github.username
            summary.repository = draft.github.repository
            summary.clone_url = draft.github.clone_url or None
            summary.default_branch = draft.github.default_branch or None
        if draft.aws:
            summary.region = draft.aws.region
        return summary
