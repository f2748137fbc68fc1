"""Unit tests for content-type classification."""

import pytest

from deployer.services.classifier import DEFAULT_CONTENT_TYPE, classify


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("x.html", "text/html"),
            ("site/style.css", "text/css"),
            ("app.js", "application/javascript"),
            ("data.json", "application/json"),
            ("logo.svg", "image/svg+xml"),
            ("photo.jpeg", "image/jpeg"),
            ("font.woff2", "font/woff2"),
        ],
    )
    def test_known_extensions(self, path: str, expected: str):
        assert classify(path) == expected

    def test_unknown_extension(self):
        assert classify("x.unknownext") == DEFAULT_CONTENT_TYPE

    def test_no_extension(self):
        assert classify("noext") == "application/octet-stream"

    def test_dotfile_has_no_extension(self):
        assert classify(".gitignore") == DEFAULT_CONTENT_TYPE

    def test_case_insensitive(self):
        assert classify("INDEX.HTML") == "text/html"

    def test_only_last_suffix_counts(self):
        assert classify("bundle.min.js") == "application/javascript"
        assert classify("archive.tar.gz") == "application/gzip"

    def test_empty_path(self):
        assert classify("") == DEFAULT_CONTENT_TYPE
