"""Tests for CLI commands."""

from __future__ import annotations

import logging
import os
import sqlite3
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from docwalker.cli import _ensure_db_parent, _setup_logging, app
from docwalker.config import ChunkConfig
from docwalker.index.storage import SQLiteRecordStore


runner = CliRunner()


def _stored(db_path: Path) -> list[dict]:
    store = SQLiteRecordStore(db_path)
    try:
        return store.list_records()
    finally:
        store.close()


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("docwalker.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("docwalker.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestEnsureDbParent:
    """Tests for _ensure_db_parent helper."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "subdir" / "test.db"
        _ensure_db_parent(db_path)
        assert db_path.parent.exists()


class TestScanCommand:
    """Tests for the scan command."""

    def test_scan_records_documents(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        (src / "book" / "figures").mkdir(parents=True)
        (src / "book" / "book.xml").write_text("<book/>")
        (src / "book" / "figures" / "fig.xml").write_text("<fig/>")
        (src / "readme.txt").write_text("hi")
        db_path = tmp_path / "db" / "test.db"

        result = runner.invoke(app, ["scan", str(src), "--db", str(db_path)])

        assert result.exit_code == 0, result.stdout
        assert "submitted: 1" in result.stdout
        records = _stored(db_path)
        assert [Path(r["path"]).name for r in records] == ["book.xml"]

    def test_scan_persists_coerced_chunk_config(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        db_path = tmp_path / "test.db"

        result = runner.invoke(
            app,
            ["scan", str(src), "--db", str(db_path), "--chunk-size", "1", "--overlap", "9"],
        )

        assert result.exit_code == 0, result.stdout
        assert "Chunk size: 2 words, overlap: 1 words" in result.stdout
        store = SQLiteRecordStore(db_path)
        try:
            assert store.load_chunk_config() == ChunkConfig.from_values(2, 1)
        finally:
            store.close()

    def test_scan_custom_selector_file(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        home.mkdir()
        (home / "display.xsl").write_text("<xsl/>")
        (home / "pick.py").write_text(
            "from docwalker.models import FileAccept\n"
            "\n"
            "def select(description):\n"
            "    return [FileAccept(file_name=n, format='html', display_style='display.xsl')\n"
            "            for n in description.file_names if n.endswith('.txt')]\n"
        )
        src = tmp_path / "src"
        src.mkdir()
        (src / "page.txt").write_text("text")
        db_path = tmp_path / "test.db"

        result = runner.invoke(
            app,
            ["scan", str(src), "--db", str(db_path), "--home", str(home), "--selector", "pick.py:select"],
        )

        assert result.exit_code == 0, result.stdout
        records = _stored(db_path)
        assert len(records) == 1
        assert records[0]["format"] == "HTML"
        assert records[0]["display_style"] == str((home / "display.xsl").resolve())

    def test_scan_bad_selector(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()

        result = runner.invoke(
            app,
            ["scan", str(src), "--db", str(tmp_path / "test.db"), "--selector", "nowhere:select"],
        )

        assert result.exit_code == 2

    def test_scan_missing_root_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["scan", str(tmp_path / "missing"), "--db", str(tmp_path / "test.db")]
        )

        assert result.exit_code == 1
        assert "Cannot list directory" in result.stdout

    def test_scan_keep_going(self, tmp_path: Path) -> None:
        good = tmp_path / "good"
        good.mkdir()
        (good / "a.pdf").write_text("x")
        db_path = tmp_path / "test.db"

        result = runner.invoke(
            app,
            ["scan", str(tmp_path / "missing"), str(good), "--db", str(db_path), "--keep-going"],
        )

        assert result.exit_code == 1
        assert "Failed:" in result.stdout
        assert [Path(r["path"]).name for r in _stored(db_path)] == ["a.pdf"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that allows non-UTF-8 names")
    def test_scan_undecodable_name_keeps_other_records(self, tmp_path: Path) -> None:
        """One badly named file does not discard the rest of the run."""
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "good.xml").write_text("<doc/>")
        (docs / os.fsdecode(b"\xff.xml")).write_text("<doc/>")
        db_path = tmp_path / "test.db"

        result = runner.invoke(app, ["scan", str(docs), "--db", str(db_path), "--keep-going"])

        assert result.exit_code == 0, result.stdout
        assert [Path(r["path"]).name for r in _stored(db_path)] == ["good.xml"]

    def test_scan_reports_sink_failure(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.xml").write_text("x")
        db_path = tmp_path / "test.db"

        with patch.object(SQLiteRecordStore, "submit", side_effect=sqlite3.OperationalError("locked")):
            result = runner.invoke(app, ["scan", str(src), "--db", str(db_path)])

        assert result.exit_code == 1
        assert "Cannot submit" in result.stdout


class TestListCommand:
    """Tests for the list command."""

    def test_list_missing_db(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["list", "--db", str(tmp_path / "missing.db")])

        assert result.exit_code != 0

    def test_list_empty(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        SQLiteRecordStore(db_path).close()

        result = runner.invoke(app, ["list", "--db", str(db_path)])

        assert result.exit_code == 0
        assert "No documents recorded" in result.stdout

    def test_list_records(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.xml").write_text("x")
        db_path = tmp_path / "test.db"
        runner.invoke(app, ["scan", str(src), "--db", str(db_path)])

        result = runner.invoke(app, ["list", "--db", str(db_path)])

        assert result.exit_code == 0
        assert "XML" in result.stdout
        assert "Chunk size: 100 words, overlap: 50 words" in result.stdout


class TestPruneCommand:
    """Tests for the prune command."""

    def test_prune_missing_db(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["prune", "--db", str(tmp_path / "missing.db")])

        assert result.exit_code == 0
        assert "nothing to prune" in result.stdout

    def test_prune_removes_vanished(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.xml").write_text("x")
        db_path = tmp_path / "test.db"
        runner.invoke(app, ["scan", str(src), "--db", str(db_path)])
        (src / "a.xml").unlink()

        result = runner.invoke(app, ["prune", "--db", str(db_path)])

        assert result.exit_code == 0
        assert "Removed 1 orphaned documents." in result.stdout
        assert _stored(db_path) == []
