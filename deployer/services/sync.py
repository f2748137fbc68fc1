"""Working copy to bucket synchronization."""

import asyncio
import os
import stat
from pathlib import Path, PurePosixPath
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from deployer.models.deployment import FileEntry, SyncReport, UploadResult, WorkingCopy
from deployer.services.classifier import classify
from deployer.utils.logging import get_logger

SKIPPED_DIRECTORIES = frozenset({".git"})

logger = get_logger("sync")


def walk_working_copy(root: str | Path) -> list[FileEntry]:
    """List every regular file under ``root`` in a stable, sorted order.

    The ``.git`` directory is pruned. Symbolic links and special files are
    skipped, so a link can never pull content from outside the checkout.
    """
    root = Path(root)
    entries: list[FileEntry] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIRECTORIES)

        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            try:
                mode = path.lstat().st_mode
            except FileNotFoundError:
                logger.debug("sync.walk.vanished", path=str(path))
                continue
            if not stat.S_ISREG(mode):
                logger.debug("sync.walk.skipped", path=str(path))
                continue

            relative = path.relative_to(root).as_posix()
            entries.append(
                FileEntry(
                    relative_path=relative,
                    absolute_path=path,
                    content_type=classify(filename),
                )
            )

    return entries


def derive_entry_url(
    bucket_name: str,
    region: str,
    uploaded_keys: list[str],
    entry_filename: str = "index.html",
) -> str | None:
    """Return the public URL of the first uploaded entry file, if any."""
    for key in uploaded_keys:
        if PurePosixPath(key).name == entry_filename:
            return f"https://{bucket_name}.s3.{region}.amazonaws.com/{key}"
    return None


class SyncEngine:
    """Uploads a working copy to a bucket.

    Uploads run in worker threads, at most ``concurrency`` at a time.
    A failed upload is recorded and the remaining files are still attempted.
    """

    def __init__(self, client: Any, concurrency: int = 8):
        self.client = client
        self.concurrency = max(1, concurrency)
        self.logger = logger

    async def sync_directory(
        self, working_copy: WorkingCopy | str | Path, bucket_name: str
    ) -> SyncReport:
        """Upload every file in ``working_copy`` under its relative path."""
        root = working_copy.path if isinstance(working_copy, WorkingCopy) else Path(working_copy)
        entries = await asyncio.to_thread(walk_working_copy, root)

        self.logger.info(
            "sync.started",
            bucket=bucket_name,
            files=len(entries),
            concurrency=self.concurrency,
        )

        semaphore = asyncio.Semaphore(self.concurrency)

        async def upload(entry: FileEntry) -> UploadResult:
            async with semaphore:
                return await asyncio.to_thread(self._upload_one, entry, bucket_name)

        # gather preserves input order, so results follow traversal order
        results = await asyncio.gather(*(upload(entry) for entry in entries))
        report = SyncReport(bucket_name=bucket_name, results=list(results))

        self.logger.info(
            "sync.completed",
            bucket=bucket_name,
            uploaded=len(report.uploaded_keys),
            failed=len(report.failed),
        )
        return report

    def _upload_one(self, entry: FileEntry, bucket_name: str) -> UploadResult:
        try:
            with open(entry.absolute_path, "rb") as body:
                self.client.put_object(
                    Bucket=bucket_name,
                    Key=entry.relative_path,
                    Body=body,
                    ContentType=entry.content_type,
                )
        except (BotoCoreError, ClientError, OSError) as e:
            self.logger.warning(
                "sync.upload.failed",
                key=entry.relative_path,
                error=str(e),
            )
            return UploadResult(key=entry.relative_path, succeeded=False, error_detail=str(e))

        self.logger.debug(
            "sync.upload.completed",
            key=entry.relative_path,
            content_type=entry.content_type,
        )
        return UploadResult(key=entry.relative_path, succeeded=True)
