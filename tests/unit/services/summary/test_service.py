"""Unit tests for SummaryService."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from allergen_finder.llm.exceptions import LLMTimeoutError
from allergen_finder.llm.models import LLMCompletionResult
from allergen_finder.services.screening.models import (
    CategoryResult,
    ScreeningRequest,
    ScreeningResult,
)
from allergen_finder.services.summary import SummaryService
from tests.factories.listings import make_screened


pytestmark = pytest.mark.unit

REQUEST = ScreeningRequest(
    allergens=("Oxybenzone",),
    categories=("sunscreen",),
    rating_floor=4.0,
)

RESULT = ScreeningResult(
    results=(CategoryResult(category="sunscreen", items=(make_screened(),)),),
    allergens=("oxybenzone",),
)


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock chat client."""
    client = MagicMock()
    client.chat = AsyncMock(
        return_value=LLMCompletionResult(
            raw_response="  [Sunscreen]\n- Product: Mineral Sunscreen  ",
            model="gpt-4o-mini",
            completion_tokens=12,
        )
    )
    return client


class TestSummarize:
    """Tests for summarize."""

    async def test_returns_stripped_text(self, mock_llm: MagicMock) -> None:
        """Should return the model text without surrounding whitespace."""
        service = SummaryService(mock_llm)

        summary = await service.summarize(REQUEST, RESULT)

        assert summary == "[Sunscreen]\n- Product: Mineral Sunscreen"
        messages = mock_llm.chat.await_args.args[0]
        assert messages[0].role == "system"

    async def test_uses_prompt_options(self, mock_llm: MagicMock) -> None:
        """Should pass the prompt's options to the client."""
        await SummaryService(mock_llm).summarize(REQUEST, RESULT)

        options = mock_llm.chat.await_args.kwargs["options"]
        assert options == {"temperature": 0.2, "max_tokens": 1200}

    async def test_temperature_override(self, mock_llm: MagicMock) -> None:
        """Should let the configured temperature win over the prompt default."""
        await SummaryService(mock_llm, temperature=0.7).summarize(REQUEST, RESULT)

        options = mock_llm.chat.await_args.kwargs["options"]
        assert options["temperature"] == 0.7

    async def test_nothing_to_summarize(self, mock_llm: MagicMock) -> None:
        """Should skip the model call when no category has items."""
        empty = ScreeningResult(results=(CategoryResult(category="sunscreen"),))

        assert await SummaryService(mock_llm).summarize(REQUEST, empty) is None
        mock_llm.chat.assert_not_awaited()

    async def test_llm_error_returns_none(self, mock_llm: MagicMock) -> None:
        """Should degrade to no summary when the model call fails."""
        mock_llm.chat.side_effect = LLMTimeoutError("timeout")

        assert await SummaryService(mock_llm).summarize(REQUEST, RESULT) is None

    async def test_overall_timeout_returns_none(self, mock_llm: MagicMock) -> None:
        """Should give up once the summary budget is spent."""

        async def slow_chat(*args: object, **kwargs: object) -> LLMCompletionResult:
            await asyncio.sleep(5)
            raise AssertionError

        mock_llm.chat.side_effect = slow_chat
        service = SummaryService(mock_llm, timeout=0.05)

        assert await service.summarize(REQUEST, RESULT) is None

    async def test_blank_text_returns_none(self, mock_llm: MagicMock) -> None:
        """Should treat an empty completion as no summary."""
        mock_llm.chat.return_value = LLMCompletionResult(
            raw_response="   ", model="gpt-4o-mini"
        )

        assert await SummaryService(mock_llm).summarize(REQUEST, RESULT) is None
