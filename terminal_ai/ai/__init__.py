"""
The `ai` package turns natural language requests into shell command suggestions,
encapsulating the providers, their factory and the LLM client.
"""

from .factory import create_ai_provider
from .llm import LLMClient, LLMCompletionResponse
from .provider import AIProvider, CommandSuggestion, Message
from .providers import AnthropicProvider, AnthropicToolsProvider, OllamaProvider


__all__ = [
    "AIProvider",
    "AnthropicProvider",
    "AnthropicToolsProvider",
    "CommandSuggestion",
    "LLMClient",
    "LLMCompletionResponse",
    "Message",
    "OllamaProvider",
    "create_ai_provider",
]
