"""Unit tests for per-request working directories."""

from pathlib import Path

import pytest

from deployer.core.workspace import working_directory


class TestWorkingDirectory:
    """Tests for working_directory()."""

    def test_creates_empty_directory(self, tmp_path: Path):
        with working_directory(tmp_path, "req-1") as path:
            assert path == tmp_path / "req-1"
            assert path.is_dir()
            assert list(path.iterdir()) == []

    def test_removes_directory_on_success(self, tmp_path: Path):
        with working_directory(tmp_path, "req-1") as path:
            (path / "file.txt").write_text("x")

        assert not path.exists()

    def test_removes_directory_on_failure(self, tmp_path: Path):
        with pytest.raises(RuntimeError):
            with working_directory(tmp_path, "req-1") as path:
                (path / "nested").mkdir()
                raise RuntimeError("boom")

        assert not path.exists()

    def test_clears_leftover_directory(self, tmp_path: Path):
        stale = tmp_path / "req-1"
        stale.mkdir()
        (stale / "stale.txt").write_text("old")

        with working_directory(tmp_path, "req-1") as path:
            assert not (path / "stale.txt").exists()

    def test_keep_leaves_directory(self, tmp_path: Path):
        with working_directory(tmp_path, "req-1", keep=True) as path:
            (path / "file.txt").write_text("x")

        assert (path / "file.txt").exists()

    def test_requests_are_isolated(self, tmp_path: Path):
        with working_directory(tmp_path, "a") as first:
            with working_directory(tmp_path, "b") as second:
                assert first != second
                (second / "only-b.txt").write_text("b")
            assert first.exists()
            assert not (first / "only-b.txt").exists()

    @pytest.mark.parametrize("name", ["..", "../escape", "a/b", ""])
    def test_rejects_unsafe_names(self, tmp_path: Path, name: str):
        with pytest.raises(ValueError):
            with working_directory(tmp_path, name):
                pass
