import unittest
from unittest.mock import patch

from terminal_ai.ai.factory import create_ai_provider
from terminal_ai.ai.providers import AnthropicProvider, AnthropicToolsProvider, OllamaProvider
from terminal_ai.config import AIConfig
from terminal_ai.exceptions import ConfigurationError


@patch("terminal_ai.ai.factory.LLMClient")
class TestCreateAIProvider(unittest.TestCase):
    """Tests for selecting a provider from configuration."""

    def test_anthropic_provider(self, MockLLMClient):
        """The hosted provider is built when an API key is present."""
        config = AIConfig(provider="anthropic", anthropic_api_key="sk-test")

        provider = create_ai_provider(config)

        self.assertIs(type(provider), AnthropicProvider)
        MockLLMClient.assert_called_once_with(config.provider_configs())

    def test_hosted_alias(self, MockLLMClient):
        """`hosted` is accepted as an alias of `anthropic`."""
        provider = create_ai_provider(AIConfig(provider="hosted", anthropic_api_key="sk-test"))

        self.assertIsInstance(provider, AnthropicProvider)

    def test_anthropic_requires_api_key(self, MockLLMClient):
        """Selecting the hosted provider without a key is a configuration error."""
        with self.assertRaisesRegex(ConfigurationError, "Anthropic API key is required"):
            create_ai_provider(AIConfig(provider="anthropic"))

        MockLLMClient.assert_not_called()

    def test_tools_provider_when_enabled(self, MockLLMClient):
        """Enabling tools with the hosted provider selects the tool-enabled variant."""
        provider = create_ai_provider(
            AIConfig(provider="anthropic", anthropic_api_key="sk-test", enable_tools=True)
        )

        self.assertIsInstance(provider, AnthropicToolsProvider)

    def test_ollama_defaults(self, MockLLMClient):
        """The local provider falls back to the default host and model."""
        provider = create_ai_provider(AIConfig(provider="ollama", enable_tools=True))

        self.assertIsInstance(provider, OllamaProvider)
        self.assertEqual(provider.host, "http://localhost:11434")
        self.assertEqual(provider.model, "qwen2.5-coder:7b")

    def test_ollama_custom_host_and_model(self, MockLLMClient):
        provider = create_ai_provider(
            AIConfig(provider="local", ollama_host="http://gpu-box:11434", ollama_model="llama3")
        )

        self.assertEqual(provider.host, "http://gpu-box:11434")
        self.assertEqual(provider.model, "llama3")

    def test_unknown_provider(self, MockLLMClient):
        """Unknown provider tags are rejected."""
        with self.assertRaisesRegex(ConfigurationError, "Unsupported AI provider: openai"):
            create_ai_provider(AIConfig(provider="openai", anthropic_api_key="sk-test"))
