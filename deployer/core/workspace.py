"""Per-request working directories."""

import re
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from deployer.core.exceptions import FetchError
from deployer.utils.logging import get_logger

logger = get_logger(__name__)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


@contextmanager
def working_directory(root: str | Path, request_id: str, keep: bool = False) -> Iterator[Path]:
    """Provide an empty directory owned by one deployment.

    Any leftover directory with the same id is removed first. The directory
    is deleted again when the block exits, whether it succeeded or raised,
    unless ``keep`` is set.
    """
    if not _SAFE_NAME.match(request_id) or request_id in (".", ".."):
        raise ValueError(f"Unsafe working directory name: {request_id!r}")

    path = Path(root) / request_id
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as e:
        raise FetchError(f"Cannot prepare working directory {path}: {e}") from e

    logger.debug("workspace.created", path=str(path))
    try:
        yield path
    finally:
        if keep:
            logger.info("workspace.kept", path=str(path))
        else:
            try:
                shutil.rmtree(path)
                logger.debug("workspace.removed", path=str(path))
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error("workspace.cleanup_failed", path=str(path), error=str(e))
