"""Filesystem adaptor: path policy, document envelopes and listings."""

from fsadaptor.adaptor.adaptor import (
    CREATION_TIME,
    FILE_SIZE,
    LAST_ACCESS_TIME,
    LAST_MODIFIED_TIME,
    FsAdaptor,
)
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
    ConfigurationError,
    get_path_name,
    is_descendant_of_root,
    is_valid_path,
    parse_root_path,
)
from fsadaptor.adaptor.response import (
    DocRequest,
    DocResponse,
    IllegalStateError,
    ResponseState,
)

__all__ = [
    "CREATION_TIME",
    "ConfigurationError",
    "DocId",
    "DocIdEncoder",
    "DocIdPusher",
    "DocRequest",
    "DocResponse",
    "DocumentAttributes",
    "FILE_SIZE",
    "FileSystemError",
    "FsAdaptor",
    "HTML_CONTENT_TYPE",
    "HtmlResponseWriter",
    "IllegalStateError",
    "LAST_ACCESS_TIME",
    "LAST_MODIFIED_TIME",
    "ResponseState",
    "format_date",
    "get_path_name",
    "is_descendant_of_root",
    "is_valid_path",
    "parse_root_path",
    "guess_content_type",
    "read_attributes",
    "restore_access_time",
]
