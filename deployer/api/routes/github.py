"""GitHub credential validation endpoint."""

from fastapi import APIRouter

from deployer.api.deps import DraftsDep, ValidatorDep
from deployer.models.credentials import GitHubCredentialRequest, GitHubCredentialResponse
from deployer.models.draft import GitHubStep

router = APIRouter()


@router.post(
    "/github",
    response_model=GitHubCredentialResponse,
    summary="Validate a GitHub token",
    description="Fetch repository metadata with the token; the validated step is kept in a wizard draft.",
)
async def validate_github(
    body: GitHubCredentialRequest,
    validator: ValidatorDep,
    drafts: DraftsDep,
) -> GitHubCredentialResponse:
    """Validate GitHub access to ``username/repository``."""
    repository_data = await validator.validate_source_credential(
        body.token, body.username, body.repository
    )

    draft = await drafts.record_github(
        body.draft_id,
        GitHubStep(
            token=body.token,
            username=body.username,
            repository=body.repository,
            clone_url=repository_data.get("clone_url") or "",
            default_branch=repository_data.get("default_branch") or "",
        ),
    )

    return GitHubCredentialResponse(
        message="GitHub connection validated successfully.",
        repository_data=repository_data,
        draft_id=draft.id,
    )
