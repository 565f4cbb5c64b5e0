"""
Pytest fixtures for file manager tests.

Provides reusable test fixtures for creating temporary directories,
test files, and mock configurations.
"""

import logging
import pytest
from datetime import datetime, timezone
from pathlib import Path
import os

from file_manager.config import CollisionPolicy, Config


def set_mtime(path: Path, when: datetime) -> None:
    """Set both access and modification time of a file."""
    ts = when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for testing."""
    return tmp_path


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration that fails loudly on name clashes."""
    return Config(collision_policy=CollisionPolicy.ERROR)


@pytest.fixture
def sample_files(temp_dir: Path) -> dict:
    """
    Create sample files with different extensions for testing.

    Returns a dict mapping the expected by-type bucket to the files created.
    """
    files = {
        "txt": [],
        "jpg": [],
        "JPG": [],
        "gz": [],
        "unknown": [],
    }

    for name in ["notes.txt", "todo.txt"]:
        f = temp_dir / name
        f.write_text(f"text {name}")
        files["txt"].append(f)

    f = temp_dir / "photo.jpg"
    f.write_text("fake image")
    files["jpg"].append(f)

    # Extensions keep their case
    f = temp_dir / "SCAN.JPG"
    f.write_text("fake scan")
    files["JPG"].append(f)

    # Only the last extension counts
    f = temp_dir / "backup.tar.gz"
    f.write_bytes(b"\x1f\x8b fake archive")
    files["gz"].append(f)

    for name in ["Makefile", ".bashrc"]:
        f = temp_dir / name
        f.write_text(f"no extension {name}")
        files["unknown"].append(f)

    return files


@pytest.fixture
def dated_files(temp_dir: Path) -> dict:
    """
    Create files with known modification times.

    Returns a dict mapping the expected by-date bucket to the files created.
    """
    files = {}
    stamps = [
        ("report.pdf", datetime(2023, 1, 5, 12, 0, tzinfo=timezone.utc)),
        ("invoice.pdf", datetime(2023, 1, 5, 23, 59, tzinfo=timezone.utc)),
        ("photo.jpg", datetime(2024, 2, 29, 0, 0, 1, tzinfo=timezone.utc)),
    ]

    for name, when in stamps:
        f = temp_dir / name
        f.write_text(f"content of {name}")
        set_mtime(f, when)
        files.setdefault(when.strftime("%Y-%m-%d"), []).append(f)

    return files


@pytest.fixture
def nested_files(temp_dir: Path) -> list:
    """Create files one and two levels below the root."""
    sub = temp_dir / "sub"
    deeper = sub / "deeper"
    deeper.mkdir(parents=True)

    files = []
    for path, content in [
        (temp_dir / "top.txt", "top"),
        (sub / "middle.log", "middle level"),
        (deeper / "bottom.txt", "bottom level file"),
    ]:
        path.write_text(content)
        files.append(path)

    return files


@pytest.fixture
def capture_output() -> list:
    """Create a list to capture output from operations."""
    return []


@pytest.fixture
def output_callback(capture_output: list):
    """Create an output callback that captures messages."""
    def callback(message: str) -> None:
        capture_output.append(message)
    return callback


@pytest.fixture
def capture_errors() -> list:
    """Create a list to capture error messages from operations."""
    return []


@pytest.fixture
def error_callback(capture_errors: list):
    """Create an error callback that captures messages."""
    def callback(message: str) -> None:
        capture_errors.append(message)
    return callback


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging so handlers never outlive a test's streams."""
    yield
    logger = logging.getLogger("file_manager")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
