"""Path policy tests: root parsing, validity and containment."""

import os
import socket
from pathlib import Path

import pytest

from fsadaptor.adaptor import (
    ConfigurationError,
    get_path_name,
    is_descendant_of_root,
    is_valid_path,
    parse_root_path,
)

requires_fifo = pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="no named pipes")


@pytest.mark.parametrize(
    "candidate",
    ["/a/b", "/a/b/c", "/a/b/c/d.txt", "/a/b/.hidden"],
)
def test_paths_under_root_are_contained(candidate: str) -> None:
    """The root itself and everything below it is contained."""
    assert is_descendant_of_root(Path(candidate), Path("/a/b"))


@pytest.mark.parametrize(
    "candidate",
    ["/a", "/", "/a/bb", "/a/bb/c", "/a/c/b", "/etc/passwd", "b/c", ""],
)
def test_paths_outside_root_are_rejected(candidate: str) -> None:
    """Ancestors, prefix-sharing siblings and relative paths are rejected."""
    assert not is_descendant_of_root(Path(candidate), Path("/a/b"))


def test_containment_is_literal() -> None:
    """Dot-dot segments are compared literally, not collapsed."""
    assert is_descendant_of_root(Path("/a/b/../c"), Path("/a/b"))


def test_regular_file_is_valid(tmp_path: Path) -> None:
    """Regular files are servable."""
    path = tmp_path / "file.txt"
    path.write_text("x")
    assert is_valid_path(path)


def test_directory_is_valid(tmp_path: Path) -> None:
    """Directories are servable."""
    assert is_valid_path(tmp_path)


def test_missing_path_is_invalid(tmp_path: Path) -> None:
    """Entries that do not exist are not servable."""
    assert not is_valid_path(tmp_path / "missing")


def test_broken_symlink_is_invalid(tmp_path: Path) -> None:
    """Dangling symlinks are not servable."""
    link = tmp_path / "dangling"
    link.symlink_to(tmp_path / "nowhere")
    assert not is_valid_path(link)


def test_symlink_to_file_is_valid(tmp_path: Path) -> None:
    """Symlinks are followed."""
    target = tmp_path / "target.txt"
    target.write_text("x")
    link = tmp_path / "link.txt"
    link.symlink_to(target)
    assert is_valid_path(link)


@requires_fifo
def test_named_pipe_is_invalid(tmp_path: Path) -> None:
    """Named pipes are not servable."""
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)
    assert not is_valid_path(fifo)


def test_socket_is_invalid(unix_socket_dir: Path) -> None:
    """UNIX sockets are not servable."""
    path = unix_socket_dir / "s"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(path))
        assert not is_valid_path(path)
    finally:
        sock.close()


def test_parse_root_path_accepts_directory(tmp_path: Path) -> None:
    """A directory root is returned as an absolute path."""
    assert parse_root_path(str(tmp_path)) == tmp_path


def test_parse_root_path_makes_relative_absolute(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Relative roots are anchored at the working directory."""
    (tmp_path / "docs").mkdir()
    monkeypatch.chdir(tmp_path)
    root = parse_root_path("docs")
    assert root.is_absolute()
    assert root == Path.cwd() / "docs"


def test_parse_root_path_accepts_file(tmp_path: Path) -> None:
    """A single regular file can be the root."""
    path = tmp_path / "only.txt"
    path.write_text("x")
    assert parse_root_path(str(path)) == path


def test_parse_root_path_rejects_empty() -> None:
    """An empty source value is a configuration error."""
    with pytest.raises(ConfigurationError, match="is empty") as exc_info:
        parse_root_path("")
    assert exc_info.value.key == "FSADAPTOR_SRC"


def test_parse_root_path_rejects_missing(tmp_path: Path) -> None:
    """A root that does not exist is a configuration error."""
    with pytest.raises(ConfigurationError, match="not a valid path"):
        parse_root_path(str(tmp_path / "missing"))


@requires_fifo
def test_parse_root_path_rejects_fifo(tmp_path: Path) -> None:
    """A special file cannot be the root."""
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)
    with pytest.raises(ConfigurationError):
        parse_root_path(str(fifo))


@pytest.mark.parametrize(
    ("path", "name"),
    [
        ("/srv/docs/report.txt", "report.txt"),
        ("/srv/docs/sub", "sub"),
        ("/srv/docs/sub/", "sub"),
        ("relative/name", "name"),
        ("/", "/"),
    ],
)
def test_get_path_name(path: str, name: str) -> None:
    """Display names are the final path segment."""
    assert get_path_name(Path(path)) == name
