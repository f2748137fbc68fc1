"""Repository-to-bucket deployment endpoint."""

from fastapi import APIRouter

from deployer.api.deps import OrchestratorDep
from deployer.core.exceptions import PartialUploadFailure
from deployer.models.deployment import DeploymentRequest, WireModel

router = APIRouter()


class DeployResponse(WireModel):
    """Successful deployment."""

    message: str
    uploaded_files: list[str]
    s3_url: str | None = None
    commit: str = ""
    workflow_published: bool = False
    duration_ms: int = 0


@router.post(
    "/validate-and-deploy",
    response_model=DeployResponse,
    summary="Deploy a repository to a bucket",
    description=(
        "Clone the branch into a private working directory, optionally push a "
        "CI workflow, then upload every file to the bucket."
    ),
)
async def validate_and_deploy(
    body: DeploymentRequest,
    orchestrator: OrchestratorDep,
) -> DeployResponse:
    """Run one deployment and report the uploaded keys."""
    result = await orchestrator.deploy(body)

    if not result.success:
        raise PartialUploadFailure(result.uploaded_keys, result.failed)

    return DeployResponse(
        message="Deployment completed successfully.",
        uploaded_files=result.uploaded_keys,
        s3_url=result.entry_url,
        commit=result.commit,
        workflow_published=result.workflow_published,
        duration_ms=result.duration_ms,
    )
