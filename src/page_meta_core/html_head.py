from __future__ import annotations

from page_meta_core.accumulator import MetaAccumulator
from page_meta_core.assembler import build_result
from page_meta_core.models import RequestFacts
from page_meta_core.scanner import scan_chunks
from page_meta_core.schema import MetaExtractionResult


def extract_from_html(
    html: bytes | str,
    *,
    base_url: str,
    requested_url: str | None = None,
    status: int = 200,
    content_type: str | None = "text/html",
) -> MetaExtractionResult:
    """
    Offline extraction over an in-memory document, no network I/O.

    Bytes are decoded as UTF-8 with replacement. `base_url` plays the role of the final
    (post-redirect) URL that relative hrefs are resolved against.
    """
    text = html.decode("utf-8", errors="replace") if isinstance(html, bytes) else html

    accumulator = MetaAccumulator(base_url)
    for event in scan_chunks([text]):
        accumulator.handle(event)

    facts = RequestFacts(
        requested_url=requested_url or base_url,
        final_url=base_url,
        status=status,
        content_type=content_type,
    )
    return build_result(facts, accumulator.state)
