"""Repository fetching and publishing with GitPython."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from deployer.config import Settings, settings as default_settings
from deployer.core.exceptions import (
    FetchError,
    OperationTimeoutError,
    PublishError,
    PublishReason,
    ValidationError,
)
from deployer.models.deployment import WorkingCopy
from deployer.utils.logging import get_logger, mask_url

_REJECTED_MARKERS = ("[rejected]", "non-fast-forward", "fetch first")
_AUTH_MARKERS = (
    "authentication failed",
    "could not read username",
    "permission denied",
    "403",
    "invalid username or password",
)


def inject_token(url: str, token: str | None) -> str:
    """Embed ``token`` in an HTTPS remote URL; other URLs pass through."""
    if not token or not url.startswith("https://"):
        return url
    return url.replace("https://", f"https://x-access-token:{token}@", 1)


def _is_timeout(error: GitCommandError) -> bool:
    return "did not complete in" in str(error.stderr or "")


def _describe(error: GitCommandError) -> str:
    stderr = str(error.stderr or "").strip()
    return mask_url(stderr or str(error))


class RepositoryFetcher:
    """Obtains working copies of remote repositories and pushes files back."""

    def __init__(self, config: Settings | None = None):
        self.settings = config or default_settings
        self.logger = get_logger("fetcher")

    @property
    def _timeout(self) -> float:
        return self.settings.git_timeout_seconds

    def fetch(
        self,
        source_location: str,
        branch: str,
        work_dir: str | Path,
        token: str | None = None,
    ) -> WorkingCopy:
        """Clone ``source_location`` at ``branch`` into ``work_dir``, or update it.

        An existing checkout (``work_dir/.git``) is updated in place: the
        remote is fetched, ``branch`` is checked out (tracking
        ``origin/<branch>`` when it is not yet local) and then pulled.
        Anything else gets a fresh clone.

        Raises:
            FetchError: remote unreachable, branch missing, or the directory
                cannot be created
            OperationTimeoutError: a git command exceeded its deadline
        """
        work_dir = Path(work_dir)
        safe_source = mask_url(source_location)

        try:
            if (work_dir / ".git").exists():
                repo = self._update(work_dir, branch, token)
            else:
                repo = self._clone(source_location, branch, work_dir, token)
            commit = repo.head.commit.hexsha
        except GitCommandError as e:
            if _is_timeout(e):
                raise OperationTimeoutError("git fetch", self._timeout) from e
            self.logger.error(
                "fetcher.failed", source=safe_source, branch=branch, error=_describe(e)
            )
            raise FetchError(_describe(e), source=safe_source, branch=branch) from e
        except (InvalidGitRepositoryError, NoSuchPathError, OSError, ValueError) as e:
            self.logger.error(
                "fetcher.failed", source=safe_source, branch=branch, error=str(e)
            )
            raise FetchError(mask_url(str(e)), source=safe_source, branch=branch) from e

        self.logger.info(
            "fetcher.ready", source=safe_source, branch=branch, commit=commit[:12]
        )
        return WorkingCopy(path=work_dir, branch=branch, commit=commit)

    def _clone(
        self, source_location: str, branch: str, work_dir: Path, token: str | None
    ) -> git.Repo:
        self.logger.info(
            "fetcher.clone.started", source=mask_url(source_location), branch=branch
        )
        work_dir.parent.mkdir(parents=True, exist_ok=True)

        git.Git().clone(
            "--branch",
            branch,
            "--",
            inject_token(source_location, token),
            str(work_dir),
            kill_after_timeout=self._timeout,
        )
        repo = git.Repo(work_dir)

        # Keep the token out of .git/config
        if token:
            repo.remotes.origin.set_url(source_location)
        return repo

    def _update(self, work_dir: Path, branch: str, token: str | None) -> git.Repo:
        repo = git.Repo(work_dir)
        self.logger.info(
            "fetcher.pull.started",
            path=str(work_dir),
            branch=branch,
            current=None if repo.head.is_detached else repo.active_branch.name,
        )

        with self._authenticated_origin(repo, token):
            repo.git.fetch("origin", kill_after_timeout=self._timeout)

            if repo.head.is_detached or repo.active_branch.name != branch:
                if branch in repo.heads:
                    repo.git.checkout(branch)
                else:
                    repo.git.checkout("-b", branch, "--track", f"origin/{branch}")

            repo.git.pull("--ff-only", "origin", branch, kill_after_timeout=self._timeout)
        return repo

    @contextmanager
    def _authenticated_origin(self, repo: git.Repo, token: str | None) -> Iterator[None]:
        """Point origin at a token-bearing URL for the duration of the block."""
        if not token:
            yield
            return

        origin = repo.remotes.origin
        plain_url = origin.url
        origin.set_url(inject_token(plain_url, token))
        try:
            yield
        finally:
            origin.set_url(plain_url)

    def publish_artifact(
        self,
        working_copy: WorkingCopy,
        relative_path: str,
        content: str,
        commit_message: str,
        branch: str,
        token: str | None = None,
    ) -> str:
        """Write a file into the working copy, commit everything and push ``branch``.

        Returns the new commit SHA.

        Raises:
            ValidationError: ``relative_path`` escapes the working copy
            PublishError: nothing to commit, push rejected, or authentication failed
        """
        root = working_copy.path.resolve()
        target = (root / relative_path).resolve()
        if root not in target.parents:
            raise ValidationError(f"Path escapes the working copy: {relative_path}")

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

        repo = git.Repo(root)
        repo.git.add(A=True)

        if not repo.is_dirty(index=True, working_tree=False, untracked_files=False):
            self.logger.info("fetcher.publish.nothing_to_commit", path=relative_path)
            raise PublishError(PublishReason.NOTHING_TO_COMMIT, "nothing to commit")

        actor = git.Actor(self.settings.git_author_name, self.settings.git_author_email)
        commit = repo.index.commit(commit_message, author=actor, committer=actor)

        self.logger.info(
            "fetcher.publish.pushing",
            path=relative_path,
            branch=branch,
            commit=commit.hexsha[:12],
        )

        try:
            with self._authenticated_origin(repo, token):
                repo.git.push("origin", branch, kill_after_timeout=self._timeout)
        except GitCommandError as e:
            if _is_timeout(e):
                raise OperationTimeoutError("git push", self._timeout) from e
            raise PublishError(self._push_failure_reason(e), _describe(e)) from e

        self.logger.info("fetcher.publish.completed", branch=branch, commit=commit.hexsha[:12])
        return commit.hexsha

    @staticmethod
    def _push_failure_reason(error: GitCommandError) -> PublishReason:
        stderr = str(error.stderr or "").lower()
        if any(marker in stderr for marker in _REJECTED_MARKERS):
            return PublishReason.PUSH_REJECTED
        if any(marker in stderr for marker in _AUTH_MARKERS):
            return PublishReason.AUTHENTICATION_FAILED
        return PublishReason.UNKNOWN
