"""Root path parsing and document containment policy.

Identifiers are compared literally: neither the root nor the requested path
is canonicalized, so ``..`` segments and symlinks are not collapsed before
the containment check.
"""
from pathlib import Path

from fsadaptor.config import SRC_ENV_VAR


class ConfigurationError(Exception):
    """Raised when the adaptor configuration is unusable."""

    def __init__(self, message: str, key: str) -> None:
        """Initialize configuration error.

        Args:
            message: Error description.
            key: Name of the offending configuration key.
        """
        super().__init__(message)
        self.key = key


def parse_root_path(source: str) -> Path:
    """Turn the configured source value into the adaptor root path.

    Args:
        source: Raw configuration value.

    Returns:
        Absolute root path.

    Raises:
        ConfigurationError: If the value is empty or does not name a
            regular file or directory.
    """
    if not source:
        raise ConfigurationError(
            f"The configuration value {SRC_ENV_VAR} is empty. "
            "Please specify a valid root path.",
            SRC_ENV_VAR,
        )

    root = Path(source).absolute()
    if not is_valid_path(root):
        raise ConfigurationError(f"The path {root} is not a valid path.", SRC_ENV_VAR)

    return root


def is_valid_path(path: Path) -> bool:
    """Check whether a path names a servable document.

    Regular files and directories are servable. Sockets, FIFOs, device
    files, missing entries and broken symlinks are not. Symlinks are
    followed.

    Args:
        path: Path to check.

    Returns:
        True if the path is a regular file or a directory.
    """
    return path.is_file() or path.is_dir()


def is_descendant_of_root(path: Path, root: Path) -> bool:
    """Check whether a path is the root or lies beneath it.

    Walks the path and each of its ancestors comparing for equality with
    the root, so ``/a/bb`` is never mistaken for a child of ``/a/b``.

    Args:
        path: Candidate document path.
        root: Configured root path.

    Returns:
        True if ``path`` equals ``root`` or one of its ancestors does.
    """
    return any(candidate == root for candidate in (path, *path.parents))


def get_path_name(path: Path) -> str:
    """Return the display name of a path: its final segment.

    Args:
        path: Document path.

    Returns:
        The last path component, or the whole path when it has none
        (e.g. the filesystem root).
    """
    return path.name or str(path)
