# ABOUTME: Shared pytest fixtures for shelfsync tests.
# ABOUTME: Provides a Goodreads export CSV and a YAML config file on disk.

from pathlib import Path

import pytest

from tests.fixtures.goodreads_rows import GOODREADS_ROWS, write_goodreads_csv


@pytest.fixture
def goodreads_export(tmp_path: Path) -> Path:
    """A Goodreads export with four read books, one to-read, and one untitled row."""
    return write_goodreads_csv(tmp_path / "goodreads_library_export.csv", GOODREADS_ROWS)


@pytest.fixture
def config_file(tmp_path: Path, goodreads_export: Path) -> Path:
    """A config.yml pointing at one server and the goodreads_export fixture."""
    path = tmp_path / "config.yml"
    path.write_text(
        "servers:\n"
        "  - name: home\n"
        "    base_url: https://abs.example.com\n"
        "    onepassword_item: ABS Home\n"
        "batch_size: 2\n"
        "dry_run: false\n"
        "confidence_threshold: 0.7\n"
        f"goodreads_export_file: {goodreads_export}\n",
        encoding="utf-8",
    )
    return path
