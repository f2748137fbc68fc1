"""Wizard draft storage."""

from datetime import datetime, timedelta
from functools import lru_cache
from uuid import UUID

from deployer.config import settings
from deployer.models.draft import AwsStep, DeploymentDraft, GitHubStep


class DraftManager:
    """Keeps wizard drafts in memory between the two form steps.

    Note: drafts hold credentials, so they expire quickly and are never
    written to disk.
    """

    def __init__(self, ttl_minutes: int = 30):
        self._drafts: dict[UUID, DeploymentDraft] = {}
        self._ttl = timedelta(minutes=ttl_minutes)

    def _expired(self, draft: DeploymentDraft, now: datetime) -> bool:
        return now - draft.updated_at > self._ttl

    async def get_draft(self, draft_id: UUID) -> DeploymentDraft | None:
        """Get a draft by ID, dropping it if it has expired."""
        draft = self._drafts.get(draft_id)
        if draft and self._expired(draft, datetime.utcnow()):
            del self._drafts[draft_id]
            return None
        return draft

    async def _get_or_create(self, draft_id: UUID | None) -> DeploymentDraft:
        await self.cleanup_expired()
        if draft_id is not None:
            draft = await self.get_draft(draft_id)
            if draft:
                return draft
        draft = DeploymentDraft()
        self._drafts[draft.id] = draft
        return draft

    async def record_github(
        self, draft_id: UUID | None, step: GitHubStep
    ) -> DeploymentDraft:
        """Store a validated GitHub step, creating the draft if needed."""
        draft = await self._get_or_create(draft_id)
        draft.github = step
        draft.updated_at = datetime.utcnow()
        return draft

    async def record_aws(self, draft_id: UUID | None, step: AwsStep) -> DeploymentDraft:
        """Store a validated AWS step, creating the draft if needed."""
        draft = await self._get_or_create(draft_id)
        draft.aws = step
        draft.updated_at = datetime.utcnow()
        return draft

    async def delete_draft(self, draft_id: UUID) -> bool:
        """Delete a draft."""
        if draft_id in self._drafts:
            del self._drafts[draft_id]
            return True
        return False

    async def cleanup_expired(self) -> int:
        """Remove expired drafts. Returns count of removed drafts."""
        now = datetime.utcnow()
        expired = [
            did for did, draft in self._drafts.items() if self._expired(draft, now)
        ]
        for did in expired:
            del self._drafts[did]
        return len(expired)


@lru_cache
def get_draft_manager() -> DraftManager:
    """Get the draft manager singleton."""
    return DraftManager(ttl_minutes=settings.draft_ttl_minutes)
