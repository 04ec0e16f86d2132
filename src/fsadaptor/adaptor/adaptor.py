"""Adaptor that serves documents from the local filesystem."""
import shutil
from pathlib import Path

import structlog

from fsadaptor.adaptor.attributes import (
    DocumentAttributes,
    FileSystemError,
    format_date,
    guess_content_type,
    read_attributes,
    restore_access_time,
)
from fsadaptor.adaptor.ids import DocId, DocIdEncoder, DocIdPusher
from fsadaptor.adaptor.listing import HTML_CONTENT_TYPE, HtmlResponseWriter
from fsadaptor.adaptor.paths import (
    get_path_name,
    is_descendant_of_root,
    is_valid_path,
    parse_root_path,
)
from fsadaptor.adaptor.response import DocRequest, DocResponse
from fsadaptor.config import Settings

logger = structlog.get_logger()

LAST_MODIFIED_TIME = "Last Modified Time"
CREATION_TIME = "Creation Time"
LAST_ACCESS_TIME = "Last Access Time"
FILE_SIZE = "File Size"


class FsAdaptor:
    """Serves files and directory listings beneath a configured root.

    The root is the only identifier handed out during enumeration. Every
    other document is discovered through the links of directory listings.
    Requests for paths outside the root, or for anything that is neither
    a regular file nor a directory, are answered as not found.
    """

    def __init__(self, settings: Settings, encoder: DocIdEncoder | None = None) -> None:
        """Initialize adaptor. Call ``init`` before serving.

        Args:
            settings: Adaptor configuration.
            encoder: Link encoder for directory listings. Built from
                ``settings.base_url`` if None.
        """
        self._settings = settings
        self._encoder = encoder or DocIdEncoder(settings.base_url)
        self._root_path: Path | None = None

    def init(self) -> None:
        """Validate the configured root and fix it for the process lifetime.

        Raises:
            ConfigurationError: If the root is empty or not a valid path.
        """
        self._root_path = parse_root_path(self._settings.src)
        logger.info("adaptor_root_configured", root_path=str(self._root_path))

    @property
    def root_path(self) -> Path:
        """Configured root path.

        Raises:
            RuntimeError: If ``init`` has not been called.
        """
        if self._root_path is None:
            raise RuntimeError("FsAdaptor.init() must be called first")
        return self._root_path

    def get_doc_ids(self, pusher: DocIdPusher) -> None:
        """Push the root as the sole seed identifier.

        Args:
            pusher: Sink receiving identifiers to index.
        """
        root = self.root_path
        logger.debug("get_doc_ids", root_path=str(root))
        pusher.push_doc_ids([DocId(unique_id=str(root))])

    def get_doc_content(self, request: DocRequest, response: DocResponse) -> None:
        """Write the content and metadata of one document to a response.

        Args:
            request: Request naming the document.
            response: Envelope receiving metadata and body.

        Raises:
            FileSystemError: If attributes or file bytes cannot be read.
        """
        doc_id = request.doc_id
        root = self.root_path
        logger.debug("get_doc_content", doc_id=doc_id.unique_id)

        doc = Path(doc_id.unique_id)

        if not is_descendant_of_root(doc, root):
            logger.warning(
                "document_outside_root",
                path=str(doc),
                root_path=str(root),
            )
            response.respond_not_found()
            return

        if not is_valid_path(doc):
            logger.debug("document_unsupported_type", path=str(doc))
            response.respond_not_found()
            return

        attrs = read_attributes(doc)

        response.set_last_modified(attrs.last_modified_time)
        response.add_metadata(LAST_MODIFIED_TIME, format_date(attrs.last_modified_time))
        response.add_metadata(CREATION_TIME, format_date(attrs.creation_time))
        response.add_metadata(LAST_ACCESS_TIME, format_date(attrs.last_access_time))
        if attrs.is_regular_file:
            response.set_content_type(guess_content_type(doc))
            response.add_metadata(FILE_SIZE, str(attrs.size))

        if attrs.is_regular_file:
            self._write_file(doc, attrs, response)
        elif attrs.is_directory:
            self._write_listing(doc_id, doc, response)

    def _write_file(
        self,
        doc: Path,
        attrs: DocumentAttributes,
        response: DocResponse,
    ) -> None:
        """Copy file bytes to the response, then restore the access time.

        The restore runs after the input is closed, whether or not the copy
        succeeded. Its own failure never replaces a copy failure.
        """
        try:
            with doc.open("rb") as source:
                shutil.copyfileobj(
                    source,
                    response.get_output_stream(),
                    self._settings.chunk_size,
                )
        except OSError as e:
            raise FileSystemError(
                f"Failed to read file: {e}",
                str(doc),
                e.errno,
            ) from e
        finally:
            restore_access_time(doc, attrs)

    def _write_listing(self, doc_id: DocId, doc: Path, response: DocResponse) -> None:
        """Write an HTML page linking to each file and directory child."""
        response.set_content_type(HTML_CONTENT_TYPE)
        writer = HtmlResponseWriter(response.get_output_stream(), self._encoder)
        writer.start(doc_id, get_path_name(doc))

        try:
            children = list(doc.iterdir())
        except OSError as e:
            raise FileSystemError(
                f"Failed to list directory: {e}",
                str(doc),
                e.errno,
            ) from e

        for child in children:
            if is_valid_path(child):
                writer.add_link(DocId(unique_id=str(child)), get_path_name(child))

        writer.finish()
