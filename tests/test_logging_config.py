from __future__ import annotations

import json
import logging
from collections.abc import Generator

import httpx
import pytest
import structlog

from page_meta_core.config import Settings
from page_meta_core.logging_config import configure_logging
from page_meta_core.pipeline import extract_page_meta


@pytest.fixture()
def _restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.mark.usefixtures("_restore_root_logger")
def test_settings_drive_level_and_renderer() -> None:
    configure_logging(Settings.model_validate({"LOG_LEVEL": "DEBUG", "LOG_JSON": True}))
    root = logging.getLogger()
    assert len(root.handlers) == 1
    formatter = root.handlers[0].formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
    assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)
    assert root.level == logging.DEBUG


@pytest.mark.usefixtures("_restore_root_logger")
def test_console_renderer_is_the_default() -> None:
    configure_logging(Settings.model_validate({}))
    formatter = logging.getLogger().handlers[0].formatter
    assert isinstance(formatter.processors[-1], structlog.dev.ConsoleRenderer)
    assert logging.getLogger().level == logging.INFO


@pytest.mark.usefixtures("_restore_root_logger")
def test_explicit_arguments_override_settings() -> None:
    configure_logging(Settings.model_validate({"LOG_LEVEL": "DEBUG"}), level="warning")
    assert logging.getLogger().level == logging.WARNING


@pytest.mark.usefixtures("_restore_root_logger")
def test_unknown_level_falls_back_to_info() -> None:
    configure_logging(Settings.model_validate({"LOG_LEVEL": "chatty"}))
    assert logging.getLogger().level == logging.INFO


@pytest.mark.asyncio
@pytest.mark.usefixtures("_restore_root_logger")
async def test_pipeline_records_carry_target_url(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(Settings.model_validate({"LOG_LEVEL": "INFO", "LOG_JSON": True}))

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-type": "application/pdf"}, content=b"%PDF")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await extract_page_meta("https://Example.com/doc", client=client, settings=Settings.model_validate({}))

    lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
    non_html = [line for line in lines if line["event"].startswith("Non-HTML response")]
    assert non_html
    assert non_html[0]["target_url"] == "https://example.com/doc"
    assert non_html[0]["level"] == "info"
