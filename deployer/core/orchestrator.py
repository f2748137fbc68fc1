"""Deployment Orchestrator.

Runs one deployment end to end: fetch the repository into a private
working directory, optionally push a CI workflow back, upload the files
to the bucket and report what happened.
"""

import asyncio
import time
from collections.abc import Callable
from functools import partial
from typing import Any
from uuid import uuid4

from botocore.exceptions import BotoCoreError

from deployer.config import Settings, settings as default_settings
from deployer.core.drafts import DraftManager, get_draft_manager
from deployer.core.exceptions import (
    NotFoundError,
    PublishError,
    PublishReason,
    StorageConnectionError,
    ValidationError,
)
from deployer.core.workspace import working_directory
from deployer.models.deployment import DeploymentRequest, DeploymentResult, WorkingCopy
from deployer.services.fetcher import RepositoryFetcher
from deployer.services.storage import StorageCredential, create_s3_client
from deployer.services.sync import SyncEngine, derive_entry_url
from deployer.services.workflow import render_deploy_workflow
from deployer.utils.logging import get_logger, mask_url


class DeploymentOrchestrator:
    """Composes the fetcher and the sync engine into one deployment.

    Pipeline steps:
    1. validate - every required field present (no side effects otherwise)
    2. fetch - clone into a fresh per-request working directory
    3. publish - optionally commit and push the generated workflow
    4. sync - upload every file, continuing past per-file failures

    Hard errors (fetch, publish, credentials) propagate immediately.
    Nothing is retried here.
    """

    def __init__(
        self,
        config: Settings | None = None,
        fetcher: RepositoryFetcher | None = None,
        s3_client_factory: Callable[[StorageCredential], Any] | None = None,
        drafts: DraftManager | None = None,
    ):
        self.settings = config or default_settings
        self.fetcher = fetcher or RepositoryFetcher(self.settings)
        self.s3_client_factory = s3_client_factory or partial(
            create_s3_client, config=self.settings
        )
        self.drafts = drafts
        self.logger = get_logger("orchestrator")

    async def deploy(
        self, request: DeploymentRequest, request_id: str | None = None
    ) -> DeploymentResult:
        """Run a deployment.

        Args:
            request: What to deploy and where
            request_id: Names the working directory; generated when omitted

        Returns:
            The result; ``success`` is False when some uploads failed

        Raises:
            ValidationError: required fields are missing
            NotFoundError: the referenced draft does not exist
            FetchError: clone or checkout failed
            PublishError: the workflow could not be pushed
        """
        start_time = time.perf_counter()

        if request.draft_id is not None:
            request = await self._apply_draft(request)

        missing = request.missing_fields()
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", missing=missing
            )

        request_id = request_id or uuid4().hex
        log = self.logger.bind(request_id=request_id)
        log.info(
            "orchestrator.deploy.started",
            source=mask_url(request.git_url),
            branch=request.branch,
            bucket=request.bucket_name,
            publish_workflow=request.publish_workflow,
        )

        try:
            client = self.s3_client_factory(
                StorageCredential(
                    request.access_key_id, request.secret_access_key, request.region
                )
            )
        except BotoCoreError as e:
            raise StorageConnectionError("AWS Connection Failed.", str(e)) from e

        workflow_published = False
        with working_directory(
            self.settings.work_root,
            request_id,
            keep=self.settings.keep_working_copies,
        ) as work_dir:
            working_copy = await asyncio.to_thread(
                self.fetcher.fetch,
                request.git_url,
                request.branch,
                work_dir,
                request.github_token,
            )

            if request.publish_workflow:
                workflow_published = await self._publish_workflow(request, working_copy)

            engine = SyncEngine(client, concurrency=self.settings.upload_concurrency)
            report = await engine.sync_directory(working_copy, request.bucket_name)

        entry_url = derive_entry_url(
            request.bucket_name,
            request.region,
            report.uploaded_keys,
            self.settings.entry_filename,
        )
        duration_ms = int((time.perf_counter() - start_time) * 1000)

        result = DeploymentResult(
            success=report.success,
            uploaded_keys=report.uploaded_keys,
            failed=report.failed,
            entry_url=entry_url,
            commit=working_copy.commit,
            workflow_published=workflow_published,
            duration_ms=duration_ms,
        )
        if not report.success:
            result.error = (
                f"{len(report.failed)} of {len(report.results)} files failed to upload"
            )

        log.info(
            "orchestrator.deploy.completed",
            success=result.success,
            uploaded=len(result.uploaded_keys),
            failed=len(result.failed),
            entry_url=entry_url,
            duration_ms=duration_ms,
        )
        return result

    async def _apply_draft(self, request: DeploymentRequest) -> DeploymentRequest:
        """Fill empty credential fields from the wizard draft."""
        draft = await self.drafts.get_draft(request.draft_id) if self.drafts else None
        if draft is None:
            raise NotFoundError(
                f"Draft not found: {request.draft_id}",
                {"draft_id": str(request.draft_id)},
            )

        updates: dict[str, Any] = {}
        if draft.github:
            if not request.github_token:
                updates["github_token"] = draft.github.token
            if not request.git_url and draft.github.clone_url:
                updates["git_url"] = draft.github.clone_url
            if not request.branch and draft.github.default_branch:
                updates["branch"] = draft.github.default_branch
        if draft.aws:
            if not request.access_key_id:
                updates["access_key_id"] = draft.aws.access_key_id
            if not request.secret_access_key:
                updates["secret_access_key"] = draft.aws.secret_access_key
            if not request.region:
                updates["region"] = draft.aws.region

        return request.model_copy(update=updates)

    async def _publish_workflow(
        self, request: DeploymentRequest, working_copy: WorkingCopy
    ) -> bool:
        """Commit the generated workflow; an unchanged workflow is not an error."""
        try:
            content = render_deploy_workflow(
                request.bucket_name, request.region, request.branch
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

        try:
            await asyncio.to_thread(
                self.fetcher.publish_artifact,
                working_copy,
                self.settings.workflow_path,
                content,
                self.settings.workflow_commit_message,
                request.branch,
                request.github_token,
            )
        except PublishError as e:
            if e.reason is PublishReason.NOTHING_TO_COMMIT:
                self.logger.info(
                    "orchestrator.workflow_unchanged", path=self.settings.workflow_path
                )
                return False
            raise
        return True


# Convenience function to get orchestrator
def get_orchestrator() -> DeploymentOrchestrator:
    """Get a deployment orchestrator instance."""
    return DeploymentOrchestrator(drafts=get_draft_manager())
