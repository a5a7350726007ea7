"""LLM client implementations."""

from allergen_finder.llm.client.chat import ChatCompletionClient
from allergen_finder.llm.client.protocol import LLMClientProtocol


__all__ = ["ChatCompletionClient", "LLMClientProtocol"]
