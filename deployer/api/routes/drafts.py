"""Wizard draft endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from deployer.api.deps import DraftsDep
from deployer.core.exceptions import NotFoundError
from deployer.models.draft import DraftSummary

router = APIRouter()


@router.get("/{draft_id}", response_model=DraftSummary)
async def get_draft(draft_id: UUID, drafts: DraftsDep) -> DraftSummary:
    """Return which wizard steps have been validated, without secrets."""
    draft = await drafts.get_draft(draft_id)
    if not draft:
        raise NotFoundError(f"Draft not found: {draft_id}", {"draft_id": str(draft_id)})
    return DraftSummary.from_draft(draft)


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_draft(draft_id: UUID, drafts: DraftsDep) -> Response:
    """Discard a draft and the credentials it holds."""
    if not await drafts.delete_draft(draft_id):
        raise NotFoundError(f"Draft not found: {draft_id}", {"draft_id": str(draft_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
