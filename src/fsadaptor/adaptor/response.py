"""Request and response envelopes passed to the adaptor."""
import tempfile
from collections.abc import Iterator
from datetime import datetime
from enum import Enum
from typing import IO

from fsadaptor.adaptor.ids import DocId

DEFAULT_SPOOL_MAX_BYTES = 1024 * 1024


class IllegalStateError(Exception):
    """Raised when an envelope or writer is used out of order."""


class ResponseState(str, Enum):
    """Lifecycle of a document response."""

    SETUP = "setup"
    CONTENT = "content"
    NOT_FOUND = "not_found"


class DocRequest:
    """Request for a single document's content.

    Attributes:
        doc_id: Identifier of the requested document.
    """

    def __init__(self, doc_id: DocId) -> None:
        """Initialize request.

        Args:
            doc_id: Identifier of the requested document.
        """
        self.doc_id = doc_id

    def __repr__(self) -> str:
        return f"DocRequest(doc_id={self.doc_id.unique_id!r})"


class DocResponse:
    """Collects everything the adaptor produces for one document.

    Metadata, last-modified time and content type must be set before the
    output stream is requested. Body bytes are spooled in memory up to
    ``spool_max_bytes`` and spill to a temporary file beyond that.
    ``respond_not_found`` is terminal.
    """

    def __init__(self, spool_max_bytes: int = DEFAULT_SPOOL_MAX_BYTES) -> None:
        """Initialize an empty response.

        Args:
            spool_max_bytes: In-memory body size before spilling to disk.
        """
        self._spool_max_bytes = spool_max_bytes
        self._state = ResponseState.SETUP
        self._last_modified: datetime | None = None
        self._metadata: list[tuple[str, str]] = []
        self._content_type: str | None = None
        self._body: IO[bytes] | None = None

    def _require_setup(self) -> None:
        """Fail unless metadata may still be attached."""
        if self._state is not ResponseState.SETUP:
            raise IllegalStateError(f"Response already in state {self._state.value}")

    def set_last_modified(self, value: datetime) -> None:
        """Set the document's last-modified time.

        Args:
            value: Modification time; sent as the Last-Modified header.
        """
        self._require_setup()
        self._last_modified = value

    def add_metadata(self, key: str, value: str) -> None:
        """Attach a metadata pair. Keys may repeat."""
        self._require_setup()
        self._metadata.append((key, value))

    def set_content_type(self, content_type: str | None) -> None:
        """Set the body's MIME type. None leaves it unspecified."""
        self._require_setup()
        self._content_type = content_type

    def get_output_stream(self) -> IO[bytes]:
        """Return the byte sink for the document body.

        The first call ends the setup phase; later calls return the same
        stream.

        Raises:
            IllegalStateError: If the response was marked not found.
        """
        if self._state is ResponseState.NOT_FOUND:
            raise IllegalStateError("Response already marked not found")
        if self._body is None:
            self._body = tempfile.SpooledTemporaryFile(max_size=self._spool_max_bytes)
            self._state = ResponseState.CONTENT
        return self._body

    def respond_not_found(self) -> None:
        """Mark the document as not found. No further writes are allowed."""
        self._require_setup()
        self._state = ResponseState.NOT_FOUND

    @property
    def state(self) -> ResponseState:
        """Current lifecycle state."""
        return self._state

    @property
    def not_found(self) -> bool:
        """Whether the document was answered as not found."""
        return self._state is ResponseState.NOT_FOUND

    @property
    def last_modified(self) -> datetime | None:
        """Last-modified time, if one was set."""
        return self._last_modified

    @property
    def metadata(self) -> list[tuple[str, str]]:
        """Attached metadata pairs, in insertion order."""
        return self._metadata.copy()

    @property
    def content_type(self) -> str | None:
        """MIME type of the body, if one was set."""
        return self._content_type

    @property
    def content_length(self) -> int:
        """Number of body bytes written so far."""
        if self._body is None:
            return 0
        self._body.seek(0, 2)
        return self._body.tell()

    def iter_body(self, chunk_size: int) -> Iterator[bytes]:
        """Yield the spooled body from the start in chunks.

        Args:
            chunk_size: Maximum bytes per chunk.

        Yields:
            Consecutive body chunks.
        """
        if self._body is None:
            return
        self._body.seek(0)
        while chunk := self._body.read(chunk_size):
            yield chunk

    def read_body(self) -> bytes:
        """Return the whole body."""
        return b"".join(self.iter_body(DEFAULT_SPOOL_MAX_BYTES))

    def close(self) -> None:
        """Release the spooled body."""
        if self._body is not None:
            self._body.close()
