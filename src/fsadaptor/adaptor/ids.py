"""Document identifiers, their URL encoding, and the enumeration sink."""
from collections.abc import Iterable
from urllib.parse import quote

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()

DOC_ROUTE = "/api/v1/doc"


class DocId(BaseModel):
    """Identifier of a document served by the adaptor.

    Attributes:
        unique_id: Textual form of the document's filesystem path.
    """

    model_config = ConfigDict(frozen=True)

    unique_id: str = Field(description="Filesystem path of the document")

    def __str__(self) -> str:
        return self.unique_id


class DocIdEncoder:
    """Maps document identifiers to retrieval URLs."""

    def __init__(self, base_url: str = "") -> None:
        """Initialize encoder.

        Args:
            base_url: Scheme and authority the adaptor is reachable at,
                e.g. ``http://localhost:5678``. Empty yields root-relative
                URLs.
        """
        self._base_url = base_url.rstrip("/")

    def encode_doc_id(self, doc_id: DocId) -> str:
        """Build the URL that retrieves a document.

        Args:
            doc_id: Document identifier.

        Returns:
            URL with the identifier percent-encoded in the query. Relative
            to the server root when no base URL is configured.
        """
        encoded = quote(doc_id.unique_id, safe="/", errors="surrogateescape")
        return f"{self._base_url}{DOC_ROUTE}?id={encoded}"


class DocIdPusher:
    """Collects document identifiers pushed during enumeration."""

    def __init__(self) -> None:
        """Initialize an empty pusher."""
        self._batches: list[list[DocId]] = []

    def push_doc_ids(self, doc_ids: Iterable[DocId]) -> None:
        """Register a batch of identifiers for indexing.

        Args:
            doc_ids: Identifiers to register.
        """
        batch = list(doc_ids)
        self._batches.append(batch)
        logger.debug("doc_ids_pushed", count=len(batch))

    @property
    def batches(self) -> list[list[DocId]]:
        """Pushed batches, in push order."""
        return [batch.copy() for batch in self._batches]

    @property
    def doc_ids(self) -> list[DocId]:
        """Every pushed identifier, in push order."""
        return [doc_id for batch in self._batches for doc_id in batch]
