"""Filesystem attribute snapshots for document responses."""
import mimetypes
import os
import stat
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict

logger = structlog.get_logger()

DATE_FORMAT = "%Y-%m-%d"


class FileSystemError(Exception):
    """Raised when reading a document from the filesystem fails."""

    def __init__(self, message: str, path: str, code: int | None = None) -> None:
        """Initialize filesystem error.

        Args:
            message: Error description.
            path: Path that caused the error.
            code: Optional errno value of the underlying OS error.
        """
        super().__init__(message)
        self.path = path
        self.code = code


class DocumentAttributes(BaseModel):
    """Read-only snapshot of a document's filesystem attributes.

    Attributes:
        creation_time: Birth time where the platform records it, otherwise
            the inode change time.
        last_modified_time: Content modification time.
        last_access_time: Access time at the moment of the snapshot.
        size: Size in bytes.
        is_regular_file: Whether the path is a regular file.
        is_directory: Whether the path is a directory.
        atime_ns: Raw access time, kept for restoring it after a read.
        mtime_ns: Raw modification time, written back alongside ``atime_ns``.
    """

    model_config = ConfigDict(frozen=True)

    creation_time: datetime
    last_modified_time: datetime
    last_access_time: datetime
    size: int
    is_regular_file: bool
    is_directory: bool
    atime_ns: int
    mtime_ns: int


def _to_datetime(timestamp: float) -> datetime:
    """Convert an epoch timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def read_attributes(path: Path) -> DocumentAttributes:
    """Read the attributes of a document, following symlinks.

    Args:
        path: Document path.

    Returns:
        Attribute snapshot for the path.

    Raises:
        FileSystemError: If the path cannot be stat'ed.
    """
    try:
        st = path.stat()
    except OSError as e:
        raise FileSystemError(
            f"Failed to read attributes: {e}",
            str(path),
            e.errno,
        ) from e

    created = getattr(st, "st_birthtime", None)
    if created is None:
        created = st.st_ctime

    return DocumentAttributes(
        creation_time=_to_datetime(created),
        last_modified_time=_to_datetime(st.st_mtime),
        last_access_time=_to_datetime(st.st_atime),
        size=st.st_size,
        is_regular_file=stat.S_ISREG(st.st_mode),
        is_directory=stat.S_ISDIR(st.st_mode),
        atime_ns=st.st_atime_ns,
        mtime_ns=st.st_mtime_ns,
    )


def format_date(value: datetime) -> str:
    """Format a timestamp as a ``YYYY-MM-DD`` date in local time."""
    return value.astimezone().strftime(DATE_FORMAT)


def guess_content_type(path: Path) -> str | None:
    """Guess a document's MIME type from its name.

    Args:
        path: Document path.

    Returns:
        The guessed MIME type, or None when unknown.
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type


def restore_access_time(path: Path, attrs: DocumentAttributes) -> bool:
    """Write a previously captured access time back to a file.

    Reading a file may bump its access time. Failure is expected when the
    adaptor may read but not modify the file, so it is logged and dropped.

    Args:
        path: File whose access time should be restored.
        attrs: Snapshot taken before the file was read.

    Returns:
        True if the access time was written back.
    """
    try:
        os.utime(path, ns=(attrs.atime_ns, attrs.mtime_ns))
    except OSError as e:
        logger.info("access_time_restore_failed", path=str(path), error=str(e))
        return False
    return True
