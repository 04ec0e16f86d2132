"""Pytest configuration and fixtures."""

import os
import shutil
import socket
import sys
import tempfile
from collections.abc import Iterator
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from fastapi.testclient import TestClient

from fsadaptor.adaptor import FsAdaptor
from fsadaptor.app import create_app
from fsadaptor.config import Settings

REPORT_BYTES = b"Quarterly numbers look fine. See annex B.\n"


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    """Create a small document tree.

    Layout::

        docs/
            report.txt      (42 bytes)
            sub/
                a.txt
                .hidden-fifo    (named pipe, where supported)
            nested/
                deeper/
    """
    root = tmp_path / "docs"
    root.mkdir()
    (root / "report.txt").write_bytes(REPORT_BYTES)

    sub = root / "sub"
    sub.mkdir()
    (sub / "a.txt").write_text("alpha\n", encoding="utf-8")
    if hasattr(os, "mkfifo"):
        os.mkfifo(sub / ".hidden-fifo")

    (root / "nested" / "deeper").mkdir(parents=True)
    return root


@pytest.fixture
def unix_socket_dir() -> Iterator[Path]:
    """Short-named directory for binding UNIX sockets (path length limits)."""
    if not hasattr(socket, "AF_UNIX"):
        pytest.skip("UNIX sockets not supported")
    directory = Path(tempfile.mkdtemp(prefix="fsa"))
    try:
        yield directory
    finally:
        shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def settings(docs_root: Path) -> Settings:
    """Create test settings rooted at the document tree."""
    return Settings(
        src=str(docs_root),
        host="127.0.0.1",
        port=5678,
        debug=True,
        key="",
    )


@pytest.fixture
def adaptor(settings: Settings) -> FsAdaptor:
    """Create an initialized adaptor."""
    fs_adaptor = FsAdaptor(settings)
    fs_adaptor.init()
    return fs_adaptor


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Create test client with configured app."""
    app = create_app(settings)
    return TestClient(app)
