"""Services wrapping GitHub, git and S3."""

from deployer.services.classifier import classify
from deployer.services.credentials import CredentialValidator
from deployer.services.fetcher import RepositoryFetcher
from deployer.services.storage import StorageCredential, create_s3_client
from deployer.services.sync import SyncEngine, derive_entry_url, walk_working_copy
from deployer.services.workflow import render_deploy_workflow

__all__ = [
    "classify",
    "CredentialValidator",
    "RepositoryFetcher",
    "StorageCredential",
    "create_s3_client",
    "SyncEngine",
    "derive_entry_url",
    "walk_working_copy",
    "render_deploy_workflow",
]
