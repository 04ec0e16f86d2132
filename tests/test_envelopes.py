"""Response envelope, listing writer and identifier tests."""

import io

import pytest

from fsadaptor.adaptor import (
    DocId,
    DocIdEncoder,
    DocIdPusher,
    DocResponse,
    HtmlResponseWriter,
    IllegalStateError,
    ResponseState,
)


def test_encoder_builds_root_relative_urls() -> None:
    """Without a base URL, links are relative to the server root."""
    encoder = DocIdEncoder()
    assert encoder.encode_doc_id(DocId(unique_id="/srv/docs/a b.txt")) == (
        "/api/v1/doc?id=/srv/docs/a%20b.txt"
    )


def test_encoder_prefixes_base_url() -> None:
    """A configured base URL is prepended without doubling slashes."""
    encoder = DocIdEncoder("http://adaptor:5678/")
    assert encoder.encode_doc_id(DocId(unique_id="/srv/docs/x&y")) == (
        "http://adaptor:5678/api/v1/doc?id=/srv/docs/x%26y"
    )


def test_pusher_keeps_batches_in_order() -> None:
    """Every pushed identifier is kept, batch by batch."""
    pusher = DocIdPusher()
    pusher.push_doc_ids([DocId(unique_id="/a")])
    pusher.push_doc_ids(DocId(unique_id=p) for p in ("/b", "/c"))

    assert [len(batch) for batch in pusher.batches] == [1, 2]
    assert [str(d) for d in pusher.doc_ids] == ["/a", "/b", "/c"]


def test_listing_writer_renders_page() -> None:
    """A started, linked and finished listing is a complete page."""
    out = io.BytesIO()
    writer = HtmlResponseWriter(out, DocIdEncoder())

    writer.start(DocId(unique_id="/srv/docs"), "docs")
    writer.add_link(DocId(unique_id="/srv/docs/a.txt"), "a.txt")
    writer.add_link(DocId(unique_id="/srv/docs/b.txt"))
    writer.finish()

    page = out.getvalue().decode("utf-8")
    assert page.startswith("<!DOCTYPE html>")
    assert "<h1>Folder docs</h1>" in page
    assert '<a href="/api/v1/doc?id=/srv/docs/a.txt">a.txt</a>' in page
    assert ">/srv/docs/b.txt</a>" in page
    assert page.rstrip().endswith("</html>")


def test_listing_writer_escapes_names() -> None:
    """Titles and labels are HTML-escaped."""
    out = io.BytesIO()
    writer = HtmlResponseWriter(out, DocIdEncoder())

    writer.start(DocId(unique_id="/srv/<docs>"), "<docs>")
    writer.add_link(DocId(unique_id='/srv/<docs>/"q".txt'), '"q".txt')
    writer.finish()

    page = out.getvalue().decode("utf-8")
    assert "<docs>" not in page
    assert "&lt;docs&gt;" in page
    assert "&quot;q&quot;.txt</a>" in page


def test_listing_writer_rejects_link_before_start() -> None:
    writer = HtmlResponseWriter(io.BytesIO(), DocIdEncoder())
    with pytest.raises(IllegalStateError):
        writer.add_link(DocId(unique_id="/a"))


def test_listing_writer_rejects_double_finish() -> None:
    writer = HtmlResponseWriter(io.BytesIO(), DocIdEncoder())
    writer.start(DocId(unique_id="/a"))
    writer.finish()
    with pytest.raises(IllegalStateError):
        writer.finish()


def test_response_not_found_is_terminal() -> None:
    """Nothing may be written after a not-found answer."""
    response = DocResponse()
    response.respond_not_found()

    assert response.state is ResponseState.NOT_FOUND
    with pytest.raises(IllegalStateError):
        response.add_metadata("k", "v")
    with pytest.raises(IllegalStateError):
        response.get_output_stream()


def test_response_metadata_closes_once_body_starts() -> None:
    """Metadata must be attached before the body is written."""
    response = DocResponse()
    response.add_metadata("k", "v1")
    response.add_metadata("k", "v2")
    response.get_output_stream().write(b"body")

    with pytest.raises(IllegalStateError):
        response.set_content_type("text/plain")
    with pytest.raises(IllegalStateError):
        response.respond_not_found()
    assert response.metadata == [("k", "v1"), ("k", "v2")]


def test_response_body_is_streamed_in_chunks() -> None:
    """The spooled body is replayed from the start in bounded chunks."""
    response = DocResponse(spool_max_bytes=8)
    stream = response.get_output_stream()
    stream.write(b"0123456789")
    assert response.get_output_stream() is stream

    assert response.content_length == 10
    assert list(response.iter_body(4)) == [b"0123", b"4567", b"89"]
    response.close()


def test_empty_response_has_no_body() -> None:
    response = DocResponse()
    assert response.content_length == 0
    assert list(response.iter_body(4)) == []
