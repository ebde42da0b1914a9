"""Environment-driven configuration for terminal-ai."""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from .exceptions import ConfigurationError

DEFAULT_PROVIDER = "anthropic"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "qwen2.5-coder:7b"
DEFAULT_REQUEST_TIMEOUT = 120.0


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() == "true"


@dataclass
class AIConfig:
    """Which backend to talk to and how."""

    provider: str = DEFAULT_PROVIDER
    anthropic_api_key: Optional[str] = None
    ollama_host: Optional[str] = None
    ollama_model: Optional[str] = None
    enable_tools: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def provider_configs(self) -> Dict:
        """
        Builds the per-provider configuration passed to `aisuite.Client`.

        Only the backends that can actually be reached are included, so a missing
        API key never ends up as an empty string inside the SDK config.
        """
        configs: Dict[str, Dict] = {
            "ollama": {
                "api_url": self.ollama_host or DEFAULT_OLLAMA_HOST,
                "timeout": self.request_timeout,
            }
        }
        if self.anthropic_api_key:
            configs["anthropic"] = {
                "api_key": self.anthropic_api_key,
                "timeout": self.request_timeout,
            }
        return configs


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    format: str = "console"


def get_config_from_env() -> AIConfig:
    """Reads the AI configuration from the process environment."""
    timeout = os.environ.get("AI_REQUEST_TIMEOUT")
    try:
        request_timeout = float(timeout) if timeout else DEFAULT_REQUEST_TIMEOUT
    except ValueError:
        raise ConfigurationError(f"AI_REQUEST_TIMEOUT must be a number of seconds, got {timeout!r}")
    return AIConfig(
        provider=os.environ.get("AI_PROVIDER") or DEFAULT_PROVIDER,
        anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY") or None,
        ollama_host=os.environ.get("OLLAMA_HOST") or None,
        ollama_model=os.environ.get("OLLAMA_MODEL") or None,
        enable_tools=_env_flag("ENABLE_MCP"),
        request_timeout=request_timeout,
    )


def get_logging_config() -> LoggingConfig:
    return LoggingConfig(
        level=os.environ.get("TERMINAL_AI_LOG_LEVEL", "WARNING"),
        format=os.environ.get("TERMINAL_AI_LOG_FORMAT", "console"),
    )
