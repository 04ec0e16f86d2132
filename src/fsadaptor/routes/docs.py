"""Document enumeration and content endpoints."""
from datetime import timezone
from email.utils import format_datetime
from urllib.parse import parse_qs, quote

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from starlette.background import BackgroundTask

from fsadaptor.adaptor import (
    DocId,
    DocIdPusher,
    DocRequest,
    DocResponse,
    FileSystemError,
    FsAdaptor,
)
from fsadaptor.config import Settings

logger = structlog.get_logger()

router = APIRouter(tags=["documents"])

METADATA_HEADER = "X-Document-Metadata"
DOC_ID_PARAM = "id"


class DocIdList(BaseModel):
    """Identifiers registered for indexing.

    Attributes:
        doc_ids: Document identifiers, in push order.
    """

    doc_ids: list[str] = Field(description="Document identifiers to index")


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str


def encode_metadata(metadata: list[tuple[str, str]]) -> str:
    """Encode metadata pairs into a single header value.

    Keys and values are percent-encoded so commas and equals signs inside
    them survive.

    Args:
        metadata: Ordered key/value pairs; keys may repeat.

    Returns:
        Comma-separated ``key=value`` pairs.
    """
    return ",".join(
        f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in metadata
    )


def decode_doc_id(request: Request, default: str) -> str:
    """Read the document identifier from the raw query string.

    Listing links percent-encode undecodable filename bytes with
    ``surrogateescape``; decoding the same way gives back the exact path
    string, where the framework's UTF-8 decoding would replace those bytes.

    Args:
        request: Incoming request.
        default: Value already parsed by the framework, used when the raw
            query holds no identifier.

    Returns:
        The identifier as it was encoded by the listing.
    """
    query = request.scope.get("query_string", b"").decode("latin-1")
    values = parse_qs(
        query,
        keep_blank_values=True,
        encoding="utf-8",
        errors="surrogateescape",
    ).get(DOC_ID_PARAM)
    return values[-1] if values else default


def build_headers(response: DocResponse) -> dict[str, str]:
    """Translate a document response envelope into HTTP headers.

    Args:
        response: Completed document response.

    Returns:
        Header mapping for the HTTP response.
    """
    headers = {"Content-Length": str(response.content_length)}
    if response.last_modified is not None:
        headers["Last-Modified"] = format_datetime(
            response.last_modified.astimezone(timezone.utc),
            usegmt=True,
        )
    if response.metadata:
        headers[METADATA_HEADER] = encode_metadata(response.metadata)
    return headers


@router.get(
    "/doc-ids",
    response_model=DocIdList,
    summary="List seed document identifiers",
    description="Returns the identifiers the indexing pipeline should start from.",
)
def list_doc_ids(request: Request) -> DocIdList:
    """Enumerate seed identifiers.

    Args:
        request: FastAPI request object.

    Returns:
        The identifiers pushed by the adaptor.
    """
    adaptor: FsAdaptor = request.app.state.adaptor
    pusher = DocIdPusher()
    adaptor.get_doc_ids(pusher)
    return DocIdList(doc_ids=[doc_id.unique_id for doc_id in pusher.doc_ids])


@router.get(
    "/doc",
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Get document content",
    description=(
        "Streams file bytes or an HTML listing for a directory. "
        "Metadata is returned in response headers."
    ),
)
def get_doc(
    request: Request,
    doc_id: str = Query(alias=DOC_ID_PARAM, description="Document identifier"),
) -> StreamingResponse:
    """Serve one document.

    Runs on the worker threadpool since filesystem access blocks.

    Args:
        request: FastAPI request object.
        doc_id: Identifier of the requested document.

    Returns:
        Streaming response with the document body and metadata headers.

    Raises:
        HTTPException: 404 if the document is outside the root or not a
            file or directory.
        HTTPException: 500 if the document could not be read.
    """
    adaptor: FsAdaptor = request.app.state.adaptor
    settings: Settings = request.app.state.settings
    doc_id = decode_doc_id(request, doc_id)

    response = DocResponse(spool_max_bytes=settings.spool_max_bytes)
    try:
        adaptor.get_doc_content(DocRequest(DocId(unique_id=doc_id)), response)
    except FileSystemError as e:
        response.close()
        logger.error("document_read_error", doc_id=doc_id, error=str(e), code=e.code)
        raise HTTPException(status_code=500, detail="Failed to read document") from e

    if response.not_found:
        response.close()
        raise HTTPException(status_code=404, detail="Document not found")

    return StreamingResponse(
        response.iter_body(settings.chunk_size),
        media_type=response.content_type,
        headers=build_headers(response),
        background=BackgroundTask(response.close),
    )
