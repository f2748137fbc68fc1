"""S3 client construction.

Clients are built per request from the caller's credential; nothing is
written to process-wide AWS configuration.
"""

from dataclasses import dataclass, field
from typing import Any

import boto3
from botocore.config import Config

from deployer.config import Settings, settings as default_settings


@dataclass(frozen=True)
class StorageCredential:
    """An AWS key pair scoped to a region."""

    access_key_id: str = field(repr=False)
    secret_access_key: str = field(repr=False)
    region: str


def create_s3_client(credential: StorageCredential, config: Settings | None = None) -> Any:
    """Create an S3 client bound to ``credential``.

    Timeouts come from ``config``, falling back to the process settings.
    """
    settings = config or default_settings
    session = boto3.Session(
        aws_access_key_id=credential.access_key_id,
        aws_secret_access_key=credential.secret_access_key,
        region_name=credential.region,
    )
    return session.client(
        "s3",
        region_name=credential.region,
        config=Config(
            connect_timeout=settings.http_timeout_seconds,
            read_timeout=settings.upload_timeout_seconds,
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )
