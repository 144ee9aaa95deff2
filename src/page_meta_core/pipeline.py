from __future__ import annotations

import enum
import logging
from collections.abc import Mapping

import httpx
import structlog

from page_meta_core.accumulator import MetaAccumulator
from page_meta_core.assembler import build_non_html_result, build_result
from page_meta_core.config import Settings, load_settings
from page_meta_core.errors import FetchError, PreconditionError, RecursiveRequestError
from page_meta_core.guard import is_recursive_request, outbound_headers, validate_target_url
from page_meta_core.models import AccumulatedState, RequestFacts
from page_meta_core.scanner import TagScanner
from page_meta_core.schema import MetaExtractionResult, NonHtmlResult

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    IDLE = "idle"
    REJECTED = "rejected"
    FETCHING = "fetching"
    CONTENT_TYPE_CHECK = "content_type_check"
    SHORT_CIRCUIT_NON_HTML = "short_circuit_non_html"
    STREAMING = "streaming"
    DONE = "done"


def is_html_content_type(content_type: str | None) -> bool:
    return "text/html" in (content_type or "").lower()


def build_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.fetch_timeout_s,
        follow_redirects=True,
        max_redirects=settings.max_redirects,
    )


class MetaPipeline:
    """
    One extraction run for one request. Instances are not reusable and never shared.

    The accumulator lives only inside `run()`; if the run fails or is cancelled, its partial
    state is dropped with the stack frame.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self.state = PipelineState.IDLE

    def _transition(self, new_state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    async def run(
        self,
        url: str,
        *,
        inbound_headers: Mapping[str, str] | None = None,
    ) -> MetaExtractionResult | NonHtmlResult:
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"pipeline already used (state={self.state.value})")

        try:
            if inbound_headers is not None and is_recursive_request(inbound_headers, self._settings):
                raise RecursiveRequestError()
            requested_url = validate_target_url(url)
        except PreconditionError:
            self._transition(PipelineState.REJECTED)
            raise

        self._transition(PipelineState.FETCHING)
        with structlog.contextvars.bound_contextvars(target_url=requested_url):
            result = await self._fetch(requested_url)
        self._transition(PipelineState.DONE)
        return result

    async def _fetch(self, requested_url: str) -> MetaExtractionResult | NonHtmlResult:
        try:
            async with self._client.stream(
                "GET", requested_url, headers=outbound_headers(self._settings)
            ) as response:
                self._transition(PipelineState.CONTENT_TYPE_CHECK)
                facts = RequestFacts(
                    requested_url=requested_url,
                    final_url=str(response.url),
                    status=response.status_code,
                    content_type=response.headers.get("content-type"),
                )
                if not is_html_content_type(facts.content_type):
                    self._transition(PipelineState.SHORT_CIRCUIT_NON_HTML)
                    logger.info(
                        "Non-HTML response for %s (status=%d content_type=%r)",
                        requested_url,
                        facts.status,
                        facts.content_type,
                    )
                    result: MetaExtractionResult | NonHtmlResult = build_non_html_result(facts)
                else:
                    self._transition(PipelineState.STREAMING)
                    accumulated = await self._scan(response, base_url=facts.final_url)
                    result = build_result(facts, accumulated)
        except httpx.HTTPError as exc:
            logger.warning("Fetch failed for %s: %s", requested_url, exc)
            raise FetchError(str(exc) or None, url=requested_url) from exc
        return result

    async def _scan(self, response: httpx.Response, *, base_url: str) -> AccumulatedState:
        scanner = TagScanner()
        accumulator = MetaAccumulator(base_url)
        async for text in response.aiter_text():
            for event in scanner.feed(text):
                accumulator.handle(event)
            if self._settings.stop_at_head_end and scanner.head_closed:
                logger.debug("Stopping after </head> for %s", base_url)
                break
        for event in scanner.close():
            accumulator.handle(event)
        return accumulator.state


async def extract_page_meta(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
    inbound_headers: Mapping[str, str] | None = None,
) -> MetaExtractionResult | NonHtmlResult:
    """
    Fetch `url` and extract its `<head>` metadata.

    Raises PreconditionError subclasses before any network I/O, and FetchError for transport
    failures. A non-HTML response is not an error: it yields a NonHtmlResult.
    """
    settings = settings or load_settings()
    if client is not None:
        return await MetaPipeline(client, settings).run(url, inbound_headers=inbound_headers)
    async with build_client(settings) as own_client:
        return await MetaPipeline(own_client, settings).run(url, inbound_headers=inbound_headers)
