"""Pytest configuration and fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import git
import pytest
from httpx import ASGITransport, AsyncClient

from deployer.config import Settings
from deployer.core.drafts import get_draft_manager
from deployer.main import app

ACTOR = git.Actor("Test Author", "author@example.com")


class RemoteRepository:
    """A bare repository on disk plus a seed clone used to push commits to it."""

    def __init__(self, root: Path):
        self.path = root / "remote.git"
        self.bare = git.Repo.init(self.path, bare=True)

        self.seed = git.Repo.init(root / "seed")
        self.seed.create_remote("origin", str(self.path))
        self._seed_root = Path(self.seed.working_tree_dir)

    @property
    def url(self) -> str:
        return str(self.path)

    def commit(self, files: dict[str, str], message: str = "update", branch: str = "main") -> str:
        """Write ``files`` on ``branch`` and push them; returns the commit SHA."""
        if self.seed.head.is_valid():
            if branch in self.seed.heads:
                self.seed.git.checkout(branch)
            else:
                self.seed.git.checkout("-b", branch)

        for relative, content in files.items():
            target = self._seed_root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        self.seed.index.add([str(self._seed_root / relative) for relative in files])
        commit = self.seed.index.commit(message, author=ACTOR, committer=ACTOR)

        if self.seed.active_branch.name != branch:
            self.seed.git.branch("-M", branch)
        self.seed.git.push("origin", branch)

        if branch == "main":
            self.bare.git.symbolic_ref("HEAD", "refs/heads/main")
        return commit.hexsha

    def show(self, branch: str, relative: str) -> str:
        """Read a file from the remote at ``branch``."""
        return self.bare.git.show(f"{branch}:{relative}")


@pytest.fixture
def remote(tmp_path: Path) -> RemoteRepository:
    """A remote holding ``a.txt`` and ``sub/b.html`` on ``main``."""
    repository = RemoteRepository(tmp_path / "origin")
    repository.commit(
        {"a.txt": "hello\n", "sub/b.html": "<p>b</p>\n"},
        message="initial",
    )
    return repository


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing the working root into the test's temp dir."""
    return Settings(
        work_root=tmp_path / "work",
        keep_working_copies=False,
        upload_concurrency=4,
        git_timeout_seconds=60,
    )


@pytest.fixture
def s3_client() -> MagicMock:
    """A stand-in S3 client that accepts every upload."""
    client = MagicMock()
    client.put_object.return_value = {"ETag": '"etag"'}
    client.list_buckets.return_value = {"Buckets": [], "Owner": {}}
    return client


@pytest.fixture
async def client() -> AsyncClient:
    """Create an async test client with a fresh draft store."""
    drafts = get_draft_manager()
    drafts._drafts.clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    drafts._drafts.clear()
    app.dependency_overrides.clear()
