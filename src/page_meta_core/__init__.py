__version__ = "0.1.0"

from page_meta_core.accumulator import MetaAccumulator
from page_meta_core.assembler import build_non_html_result, build_result
from page_meta_core.config import Settings, load_settings
from page_meta_core.errors import (
    FetchError,
    InvalidUrlError,
    PageMetaError,
    PreconditionError,
    RecursiveRequestError,
    UnresolvableHrefError,
    UnsupportedProtocolError,
)
from page_meta_core.guard import check_inbound_request, error_record, validate_target_url
from page_meta_core.html_head import extract_from_html
from page_meta_core.logging_config import configure_logging
from page_meta_core.pipeline import MetaPipeline, PipelineState, extract_page_meta
from page_meta_core.scanner import TagScanner, scan_chunks
from page_meta_core.schema import (
    Alternate,
    ErrorResponse,
    Icon,
    LinkTag,
    MetaExtractionResult,
    MetaTag,
    NonHtmlResult,
    to_dict,
    to_json,
)
from page_meta_core.urls import resolve_href

__all__ = [
    "__version__",
    "Alternate",
    "ErrorResponse",
    "FetchError",
    "Icon",
    "InvalidUrlError",
    "LinkTag",
    "MetaAccumulator",
    "MetaExtractionResult",
    "MetaPipeline",
    "MetaTag",
    "NonHtmlResult",
    "PageMetaError",
    "PipelineState",
    "PreconditionError",
    "RecursiveRequestError",
    "Settings",
    "TagScanner",
    "UnresolvableHrefError",
    "UnsupportedProtocolError",
    "build_non_html_result",
    "build_result",
    "check_inbound_request",
    "configure_logging",
    "error_record",
    "extract_from_html",
    "extract_page_meta",
    "load_settings",
    "resolve_href",
    "scan_chunks",
    "to_dict",
    "to_json",
    "validate_target_url",
]
