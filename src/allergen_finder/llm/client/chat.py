"""HTTP client for OpenAI-compatible chat completion services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from pydantic import ValidationError

from allergen_finder.llm.exceptions import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from allergen_finder.llm.models import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    LLMCompletionResult,
)
from allergen_finder.observability.logging import get_logger


if TYPE_CHECKING:
    from allergen_finder.core.config import LLMSettings


logger = get_logger(__name__)


class ChatCompletionClient:
    """Async client for an OpenAI-compatible ``/chat/completions`` endpoint.

    Attributes:
        base_url: API base URL.
        model: Default model (e.g., gpt-4o-mini).
        api_key: API key for bearer authentication.
        timeout: HTTP request timeout in seconds.
        max_retries: Maximum retry attempts for transient failures.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 2,
        requests_per_minute: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key for authentication.
            model: Default model name.
            base_url: API base URL.
            timeout: HTTP request timeout in seconds (default: 30).
            max_retries: Maximum retries for transient failures (default: 2).
            requests_per_minute: Client-side rate limit (default: 30).
            http_client: Pre-built HTTP client (tests).
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._http_client = http_client
        self._owns_http_client = http_client is None
        # One request per (60/rpm) seconds, no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @classmethod
    def from_settings(cls, settings: LLMSettings, api_key: str) -> ChatCompletionClient:
        """Build a client from the ``llm`` settings section."""
        return cls(
            api_key=api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            requests_per_minute=settings.requests_per_minute,
        )

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    async def initialize(self) -> None:
        """Initialize the HTTP client with auth headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
            ),
        )
        logger.info(
            "ChatCompletionClient initialized",
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("ChatCompletionClient shutdown")

    async def _execute_with_retry(self, request: ChatRequest) -> ChatResponse:
        """Execute request with retry logic for transient failures."""
        if not self.api_key:
            msg = "No API key configured for the chat completion service"
            raise LLMConfigurationError(msg)

        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            await self._rate_limiter.acquire()

            try:
                response = await self._http_client.post(
                    self.chat_url,
                    json=request.model_dump(exclude_none=True),
                )

                if response.status_code == 429:
                    retry_after = response.headers.get("retry-after", "60")
                    msg = f"Rate limit exceeded, retry after {retry_after}s"
                    raise LLMRateLimitError(msg)

                response.raise_for_status()
                return ChatResponse.model_validate(response.json())

            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    "Chat completion timeout",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Chat completion timeout after {self.timeout}s"
                raise LLMTimeoutError(msg) from e

            except httpx.HTTPStatusError as e:
                logger.warning(
                    "Chat completion failed",
                    status_code=e.response.status_code,
                    url=self.chat_url,
                )
                msg = f"Chat completion returned {e.response.status_code}"
                raise LLMResponseError(msg) from e

            except httpx.RequestError as e:
                last_exception = e
                logger.warning(
                    "Chat completion connection error",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e),
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Cannot connect to chat completion service: {e}"
                raise LLMUnavailableError(msg) from e

            except (ValidationError, ValueError) as e:
                msg = f"Unexpected chat completion body: {e}"
                raise LLMResponseError(msg) from e

        msg = "Max retries exceeded"
        raise LLMUnavailableError(msg) from last_exception

    async def chat(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Run a chat completion.

        Args:
            messages: Conversation, system message first.
            model: Model to use (defaults to client's default model).
            options: ``temperature`` and ``max_tokens`` overrides.

        Returns:
            LLMCompletionResult with the first choice's content.

        Raises:
            LLMConfigurationError: If no API key is set.
            LLMUnavailableError: If the service cannot be reached.
            LLMTimeoutError: If request times out.
            LLMResponseError: If the service returns an error.
            LLMRateLimitError: If the service rate limits the request.
        """
        options = options or {}
        request = ChatRequest(
            model=model or self.model,
            messages=messages,
            temperature=options.get("temperature", 0.2),
            max_tokens=options.get("max_tokens"),
        )

        response = await self._execute_with_retry(request)
        if not response.choices:
            msg = "Chat completion returned no choices"
            raise LLMResponseError(msg)

        usage = response.usage
        return LLMCompletionResult(
            raw_response=response.choices[0].message.content,
            model=response.model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )

    async def generate(
        self,
        prompt: str,
        *,
        model: str | None = None,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Single-prompt convenience wrapper around ``chat``."""
        messages: list[ChatMessage] = []
        if system:
            messages.append(ChatMessage(role="system", content=system))
        messages.append(ChatMessage(role="user", content=prompt))
        return await self.chat(messages, model=model, options=options)
