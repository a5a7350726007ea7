"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

import orjson
import pytest
from loguru import logger

from allergen_finder.observability.logging import (
    InterceptHandler,
    _format_json,
    _format_text,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    setup_logging,
    unbind_context,
)


if TYPE_CHECKING:
    from collections.abc import Iterator


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset_context() -> Iterator[None]:
    clear_context()
    yield
    clear_context()


def make_record(**extra: Any) -> dict[str, Any]:
    return {
        "time": datetime(2025, 1, 1, tzinfo=UTC),
        "level": SimpleNamespace(name="INFO"),
        "message": "Category screened",
        "name": "allergen_finder.services.screening.service",
        "function": "_screen_category",
        "line": 42,
        "extra": dict(extra),
        "exception": None,
    }


class TestContext:
    """Tests for the logging context helpers."""

    def test_bind_and_unbind(self) -> None:
        """Should add and remove context fields."""
        bind_context(request_id="req-1", category="sunscreen")
        unbind_context("category")

        assert get_context() == {"request_id": "req-1"}

    def test_clear(self) -> None:
        """Should drop every context field."""
        bind_context(request_id="req-1")
        clear_context()

        assert get_context() == {}

    def test_get_context_is_a_copy(self) -> None:
        """Should not let callers mutate the live context."""
        bind_context(request_id="req-1")
        get_context()["request_id"] = "other"

        assert get_context() == {"request_id": "req-1"}


class TestFormatters:
    """Tests for the record formatters."""

    def test_json_includes_context_and_extra(self) -> None:
        """Should emit one JSON line with context and bound fields."""
        bind_context(request_id="req-1")
        record = make_record(name="screening", kept=3)

        line = _format_json(record)

        assert line.endswith("\n")
        payload = orjson.loads(line.replace("{{", "{").replace("}}", "}"))
        assert payload["message"] == "Category screened"
        assert payload["logger"] == "screening"
        assert payload["request_id"] == "req-1"
        assert payload["kept"] == 3

    def test_text_appends_fields(self) -> None:
        """Should append bound fields as key=value pairs."""
        bind_context(category="sunscreen")

        fmt = _format_text(make_record(kept=3))

        assert "category=sunscreen" in fmt
        assert "kept=3" in fmt
        assert "{exception}" not in fmt


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def _restore_handlers(self) -> Iterator[None]:
        root = logging.getLogger()
        handlers = root.handlers[:]
        yield
        logger.remove()
        root.handlers[:] = handlers

    @pytest.mark.parametrize(
        ("log_format", "is_development"),
        [("json", False), ("text", False), ("json", True)],
    )
    def test_configures_handlers(self, log_format: str, is_development: bool) -> None:
        """Should route standard library logging through Loguru."""
        setup_logging("DEBUG", log_format, is_development=is_development)

        root_handlers = logging.getLogger().handlers
        assert any(isinstance(h, InterceptHandler) for h in root_handlers)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_get_logger_binds_name(self) -> None:
        """Should return a logger usable with keyword fields."""
        setup_logging("INFO", "text")

        get_logger(__name__).info("ready", component="tests")
