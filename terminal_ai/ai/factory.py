from .llm import LLMClient
from .provider import AIProvider
from .providers import AnthropicProvider, AnthropicToolsProvider, OllamaProvider
from ..config import AIConfig, DEFAULT_OLLAMA_HOST, DEFAULT_OLLAMA_MODEL
from ..exceptions import ConfigurationError

HOSTED_PROVIDERS = ("anthropic", "hosted")
LOCAL_PROVIDERS = ("ollama", "local")


def create_ai_provider(config: AIConfig) -> AIProvider:
    """Builds the provider selected by `config.provider`."""
    provider = (config.provider or "").lower()

    if provider in HOSTED_PROVIDERS:
        if not config.anthropic_api_key:
            raise ConfigurationError("Anthropic API key is required for Anthropic provider")

        llm = LLMClient(config.provider_configs())
        if config.enable_tools:
            return AnthropicToolsProvider(llm)
        return AnthropicProvider(llm)

    if provider in LOCAL_PROVIDERS:
        return OllamaProvider(
            LLMClient(config.provider_configs()),
            host=config.ollama_host or DEFAULT_OLLAMA_HOST,
            model=config.ollama_model or DEFAULT_OLLAMA_MODEL,
        )

    raise ConfigurationError(f"Unsupported AI provider: {config.provider}")
