"""AWS credential validation and bucket setup endpoints."""

from fastapi import APIRouter, status

from deployer.api.deps import DraftsDep, ValidatorDep
from deployer.models.credentials import (
    AwsCredentialRequest,
    AwsCredentialResponse,
    CreateBucketRequest,
    CreateBucketResponse,
)
from deployer.models.draft import AwsStep
from deployer.services.storage import StorageCredential

router = APIRouter()


@router.post(
    "/aws",
    response_model=AwsCredentialResponse,
    summary="Validate AWS credentials",
    description="List buckets with the key pair; the validated step is kept in a wizard draft.",
)
async def validate_aws(
    body: AwsCredentialRequest,
    validator: ValidatorDep,
    drafts: DraftsDep,
) -> AwsCredentialResponse:
    """Validate an AWS key pair by listing its buckets."""
    buckets = await validator.validate_storage_credential(
        body.access_key_id, body.secret_access_key, body.region
    )

    draft = await drafts.record_aws(
        body.draft_id,
        AwsStep(
            access_key_id=body.access_key_id,
            secret_access_key=body.secret_access_key,
            region=body.region,
        ),
    )

    return AwsCredentialResponse(
        message="AWS credentials validated successfully.",
        buckets=buckets,
        draft_id=draft.id,
    )


@router.post(
    "/aws/buckets",
    response_model=CreateBucketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a bucket",
)
async def create_bucket(
    body: CreateBucketRequest,
    validator: ValidatorDep,
) -> CreateBucketResponse:
    """Create a bucket in the credential's region."""
    location = await validator.create_bucket(
        StorageCredential(body.access_key_id, body.secret_access_key, body.region),
        body.bucket_name,
    )
    return CreateBucketResponse(
        message=f'Bucket "{body.bucket_name}" created successfully!',
        bucket_name=body.bucket_name,
        location=location,
    )
