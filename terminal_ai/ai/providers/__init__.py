from .anthropic import AnthropicProvider
from .anthropic_tools import AnthropicToolsProvider
from .ollama import OllamaProvider

__all__ = ["AnthropicProvider", "AnthropicToolsProvider", "OllamaProvider"]
