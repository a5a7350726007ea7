"""Optional prose summary of screened results.

Runs strictly after screening. Any LLM failure is logged and yields no
summary; the screening response is returned either way.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from allergen_finder.llm.exceptions import LLMError
from allergen_finder.llm.prompts import ShortlistSummaryPrompt
from allergen_finder.observability.logging import get_logger


if TYPE_CHECKING:
    from allergen_finder.llm.client import LLMClientProtocol
    from allergen_finder.services.screening.models import (
        ScreeningRequest,
        ScreeningResult,
    )


logger = get_logger(__name__)


class SummaryService:
    """Renders a ScreeningResult as shopper-facing text via a chat model."""

    def __init__(
        self,
        llm_client: LLMClientProtocol,
        *,
        timeout: float = 30.0,
        temperature: float | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            llm_client: Initialized chat client.
            timeout: Overall budget for the summary, retries included.
            temperature: Overrides the prompt's default temperature.
        """
        self._llm = llm_client
        self._timeout = timeout
        self._temperature = temperature
        self._prompt = ShortlistSummaryPrompt()

    async def summarize(
        self,
        request: ScreeningRequest,
        result: ScreeningResult,
    ) -> str | None:
        """Summarize the screened shortlist.

        Args:
            request: The cleaned screening request.
            result: Its screening result.

        Returns:
            The prose summary, or None when there is nothing to summarize
            or the model call failed.
        """
        if not any(category.items for category in result.results):
            return None

        messages = self._prompt.build_messages(request=request, result=result)
        options = self._prompt.get_options()
        if self._temperature is not None:
            options["temperature"] = self._temperature
        try:
            async with asyncio.timeout(self._timeout):
                completion = await self._llm.chat(
                    messages,
                    options=options,
                )
        except LLMError as e:
            logger.warning("Summary generation failed", error=str(e))
            return None
        except TimeoutError:
            logger.warning("Summary generation timed out", timeout=self._timeout)
            return None

        text = completion.raw_response.strip()
        logger.debug(
            "Summary generated",
            model=completion.model,
            completion_tokens=completion.completion_tokens,
        )
        return text or None
