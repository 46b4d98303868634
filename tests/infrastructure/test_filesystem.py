"""Tests for filesystem infrastructure components."""

from pathlib import Path

from job_match_analysis.infrastructure import LocalFileSystem


class TestLocalFileSystem:
    def test_write_text_creates_parents_and_keeps_line_endings(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "exports" / "history.csv"

        fs.write_text("a,b\r\n1,2\n", path)

        assert fs.exists(path)
        assert path.read_bytes() == b"a,b\r\n1,2\n"

    def test_read_text_returns_content(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "engine.toml"
        path.write_text("schema_version = 1\n", encoding="utf-8")

        assert fs.read_text(path) == "schema_version = 1\n"

    def test_exists_is_false_for_missing_path(self, tmp_path: Path) -> None:
        assert LocalFileSystem().exists(tmp_path / "missing.toml") is False
