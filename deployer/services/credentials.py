"""Credential validation against GitHub and S3."""

import asyncio
import re
from collections.abc import Callable
from functools import partial
from typing import Any

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from deployer.config import Settings, settings as default_settings
from deployer.core.exceptions import (
    NotFoundError,
    OperationTimeoutError,
    StorageConnectionError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)
from deployer.services.storage import StorageCredential, create_s3_client
from deployer.utils.logging import get_logger

# Characters GitHub allows in owner and repository names
NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _require(**fields: str) -> None:
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}", missing=missing
        )


def _provider_message(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        return error.get("Message") or error.get("Code") or str(exc)
    return str(exc)


class CredentialValidator:
    """Checks that GitHub and AWS credentials are usable.

    Holds no credential state; every call builds its own client.
    """

    def __init__(
        self,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        s3_client_factory: Callable[[StorageCredential], Any] | None = None,
    ):
        self.settings = config or default_settings
        self._transport = transport
        self._s3_client_factory = s3_client_factory or partial(
            create_s3_client, config=self.settings
        )
        self.logger = get_logger("credentials")

    async def validate_source_credential(
        self, token: str, owner: str, repo_name: str
    ) -> dict[str, Any]:
        """Fetch repository metadata with ``token``.

        Returns the GitHub payload unmodified.

        Raises:
            ValidationError: an argument is empty (no request is made)
            UnauthorizedError: GitHub answered 401
            NotFoundError: GitHub answered 404
            UpstreamUnavailableError: network failure or any other status
            OperationTimeoutError: the request exceeded its deadline
        """
        _require(token=token, username=owner, repository=repo_name)
        invalid = [
            name
            for name, value in (("username", owner), ("repository", repo_name))
            if not NAME_PATTERN.match(value) or value in (".", "..")
        ]
        if invalid:
            raise ValidationError(
                f"Invalid characters in: {', '.join(invalid)}", invalid=invalid
            )

        url = f"{self.settings.github_api_url.rstrip('/')}/repos/{owner}/{repo_name}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        timeout = self.settings.http_timeout_seconds

        self.logger.info("credentials.github.validating", owner=owner, repository=repo_name)

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=timeout
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise OperationTimeoutError("GitHub repository lookup", timeout) from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(
                f"Could not reach GitHub: {e}", {"url": url}
            ) from e

        if response.status_code == 401:
            self.logger.warning("credentials.github.unauthorized", owner=owner)
            raise UnauthorizedError("Invalid GitHub token or access denied.")

        if response.status_code == 404:
            raise NotFoundError(
                f"Repository not found: {owner}/{repo_name}",
                {"owner": owner, "repository": repo_name},
            )

        if not response.is_success:
            raise UpstreamUnavailableError(
                f"Failed to fetch repository: {response.reason_phrase} "
                f"(HTTP {response.status_code})",
                {"status_code": response.status_code},
            )

        payload = response.json()
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(
                "Unexpected repository payload from GitHub",
                {"status_code": response.status_code},
            )

        self.logger.info("credentials.github.valid", owner=owner, repository=repo_name)
        return payload

    async def validate_storage_credential(
        self, access_key: str, secret_key: str, region: str
    ) -> list[dict[str, Any]]:
        """List buckets with the given key pair.

        Every failure is reported as ``StorageConnectionError`` carrying the
        provider's message.
        """
        _require(accessKeyId=access_key, secretAccessKey=secret_key, region=region)
        credential = StorageCredential(access_key, secret_key, region)

        self.logger.info("credentials.aws.validating", region=region)

        try:
            client = self._s3_client_factory(credential)
            response = await asyncio.to_thread(client.list_buckets)
        except (BotoCoreError, ClientError) as e:
            self.logger.warning("credentials.aws.failed", region=region, error=str(e))
            raise StorageConnectionError(
                "AWS Connection Failed.", _provider_message(e)
            ) from e

        buckets = response.get("Buckets", [])
        self.logger.info("credentials.aws.valid", region=region, buckets=len(buckets))
        return buckets

    async def create_bucket(
        self, credential: StorageCredential, bucket_name: str
    ) -> str | None:
        """Create ``bucket_name`` in the credential's region.

        Returns the bucket location reported by S3.
        """
        _require(
            accessKeyId=credential.access_key_id,
            secretAccessKey=credential.secret_access_key,
            region=credential.region,
            bucketName=bucket_name,
        )

        params: dict[str, Any] = {"Bucket": bucket_name}
        # us-east-1 rejects an explicit LocationConstraint
        if credential.region != "us-east-1":
            params["CreateBucketConfiguration"] = {
                "LocationConstraint": credential.region
            }

        try:
            client = self._s3_client_factory(credential)
            response = await asyncio.to_thread(client.create_bucket, **params)
        except (BotoCoreError, ClientError) as e:
            self.logger.warning(
                "credentials.aws.create_bucket_failed",
                bucket=bucket_name,
                error=str(e),
            )
            raise StorageConnectionError(
                f"Error creating bucket: {_provider_message(e)}",
                _provider_message(e),
            ) from e

        self.logger.info("credentials.aws.bucket_created", bucket=bucket_name)
        return response.get("Location")
