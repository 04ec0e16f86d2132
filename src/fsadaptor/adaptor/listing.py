"""HTML index pages for directory documents."""
import html
from enum import Enum
from typing import IO

from fsadaptor.adaptor.ids import DocId, DocIdEncoder
from fsadaptor.adaptor.response import IllegalStateError

CHARSET = "utf-8"
HTML_CONTENT_TYPE = f"text/html; charset={CHARSET}"


class WriterState(str, Enum):
    """Lifecycle of an HTML listing."""

    INITIAL = "initial"
    STARTED = "started"
    FINISHED = "finished"


class HtmlResponseWriter:
    """Writes a directory listing as a minimal HTML page.

    Each link targets the retrieval URL of a child document, so a client
    can discover the tree by following links from the root listing.
    """

    def __init__(self, output: IO[bytes], encoder: DocIdEncoder) -> None:
        """Initialize writer.

        Args:
            output: Byte stream the page is written to as UTF-8.
            encoder: Turns document identifiers into link targets.
        """
        self._output = output
        self._encoder = encoder
        self._state = WriterState.INITIAL

    def _write(self, text: str) -> None:
        self._output.write(text.encode(CHARSET, errors="replace"))

    def start(self, doc_id: DocId, title: str | None = None) -> None:
        """Write the page head and heading.

        Args:
            doc_id: Identifier of the directory being listed.
            title: Display title; defaults to the identifier.

        Raises:
            IllegalStateError: If the page was already started.
        """
        if self._state is not WriterState.INITIAL:
            raise IllegalStateError("Listing already started")
        self._state = WriterState.STARTED

        heading = html.escape(title if title else doc_id.unique_id)
        self._write(
            "<!DOCTYPE html>\n"
            f"<html><head><title>Folder {heading}</title></head>\n"
            f"<body><h1>Folder {heading}</h1>\n"
            "<ul>\n"
        )

    def add_link(self, doc_id: DocId, label: str | None = None) -> None:
        """Write one list entry linking to a child document.

        Args:
            doc_id: Identifier of the child.
            label: Link text; defaults to the identifier.

        Raises:
            IllegalStateError: If the page is not between start and finish.
        """
        if self._state is not WriterState.STARTED:
            raise IllegalStateError("Links can only be added to a started listing")

        href = html.escape(self._encoder.encode_doc_id(doc_id), quote=True)
        text = html.escape(label if label else doc_id.unique_id)
        self._write(f'<li><a href="{href}">{text}</a></li>\n')

    def finish(self) -> None:
        """Close the page and flush the underlying stream.

        Raises:
            IllegalStateError: If the page was never started or is finished.
        """
        if self._state is not WriterState.STARTED:
            raise IllegalStateError("Listing is not in progress")
        self._state = WriterState.FINISHED

        self._write("</ul>\n</body></html>\n")
        self._output.flush()
