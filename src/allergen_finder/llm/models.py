"""LLM client data models (OpenAI-compatible chat format)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Single message in chat format."""

    role: Literal["system", "user", "assistant"] = Field(
        ..., description="Message role"
    )
    content: str = Field(..., description="Message content")


class ChatRequest(BaseModel):
    """Request body for the /chat/completions endpoint."""

    model: str = Field(..., description="Model name (e.g., 'gpt-4o-mini')")
    messages: list[ChatMessage] = Field(..., description="Chat messages")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    max_tokens: int | None = Field(
        default=None,
        description="Maximum tokens to generate",
    )
    stream: bool = Field(default=False, description="Whether to stream response")


class ChatUsage(BaseModel):
    """Token usage reported by the service."""

    prompt_tokens: int = Field(default=0, description="Input token count")
    completion_tokens: int = Field(default=0, description="Output token count")
    total_tokens: int = Field(default=0, description="Total token count")


class ChatChoice(BaseModel):
    """Single choice in a chat response."""

    index: int = Field(default=0, description="Choice index")
    message: ChatMessage = Field(..., description="Generated message")
    finish_reason: str | None = Field(default=None, description="Stop reason")


class ChatResponse(BaseModel):
    """Response from the /chat/completions endpoint."""

    id: str = Field(default="", description="Unique response ID")
    model: str = Field(..., description="Model that generated response")
    choices: list[ChatChoice] = Field(..., description="Generated completions")
    usage: ChatUsage | None = Field(default=None, description="Token usage")


class LLMCompletionResult(BaseModel):
    """Internal result from an LLM completion."""

    raw_response: str = Field(..., description="Raw text response from LLM")
    model: str = Field(..., description="Model that generated response")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(
        default=None, description="Output token count"
    )

    model_config = {"frozen": True}
