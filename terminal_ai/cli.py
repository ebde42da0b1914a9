#!/usr/bin/env python3

import argparse
import asyncio
import sys

from typing import List, Optional

from rich.console import Console

from .ai import AIProvider, AnthropicToolsProvider, OllamaProvider, create_ai_provider
from .ai.factory import HOSTED_PROVIDERS
from .config import AIConfig, DEFAULT_OLLAMA_MODEL, get_config_from_env
from .exceptions import ConfigurationError
from .logging import configure_logging, get_logger
from .terminal import TerminalPrompt
from .tools import MCPManager, get_mcp_servers

log = get_logger(__name__)

DESCRIPTION = """
Talk to AI and let it execute commands for you.

The assistant is configured through environment variables:
  AI_PROVIDER            "anthropic" (default) or "ollama"
  ANTHROPIC_API_KEY      API key for the Anthropic provider
  OLLAMA_HOST            Ollama server URL (default http://localhost:11434)
  OLLAMA_MODEL           Ollama model (default qwen2.5-coder:7b)
  ENABLE_MCP             "true" to let the Anthropic provider use MCP tools
  MCP_FILESYSTEM_ENABLED "true" to add the filesystem MCP server
  MCP_GIT_ENABLED        "true" to add the git MCP server
"""

console = Console()
err_console = Console(stderr=True)


def _validate_ai_config(config: AIConfig):
    """Exits with guidance when the selected provider cannot possibly work."""
    if (config.provider or "").lower() in HOSTED_PROVIDERS and not config.anthropic_api_key:
        err_console.print("\n[red]✗ Error: ANTHROPIC_API_KEY environment variable is not set[/]")
        err_console.print("\n[grey50]Please set your Anthropic API key:[/]")
        err_console.print('  export ANTHROPIC_API_KEY="your-api-key-here"\n', markup=False)
        err_console.print("[grey50]Or use Ollama instead:[/]")
        err_console.print('  export AI_PROVIDER="ollama"\n', markup=False)
        sys.exit(1)


def _check_backend(config: AIConfig, provider: AIProvider):
    if isinstance(provider, OllamaProvider):
        if not provider.is_available():
            err_console.print("\n[red]✗ Error: Ollama server is not running[/]")
            err_console.print("\n[grey50]Please start Ollama:[/]")
            err_console.print("  ollama serve\n", markup=False)
            err_console.print("[grey50]Or set a custom host:[/]")
            err_console.print('  export OLLAMA_HOST="http://your-host:11434"\n', markup=False)
            sys.exit(1)
        console.print(
            f"\n[cyan]🤖 Using Ollama with model: {config.ollama_model or DEFAULT_OLLAMA_MODEL}[/]"
        )
    else:
        console.print("\n[cyan]🤖 Using Anthropic Claude[/]")


async def _run(config: AIConfig):
    try:
        provider = create_ai_provider(config)
    except ConfigurationError as e:
        err_console.print(f"\n✗ Error: {e}\n", style="red", markup=False)
        sys.exit(1)

    _check_backend(config, provider)

    gateway: Optional[MCPManager] = None
    if isinstance(provider, AnthropicToolsProvider):
        gateway = MCPManager(get_mcp_servers())
        await gateway.initialize()
        provider.set_tool_gateway(gateway)
        servers = gateway.get_connected_servers()
        if servers:
            console.print(
                f"[cyan]🔧 MCP servers: {', '.join(servers)} "
                f"({len(gateway.get_available_tools())} tools)[/]"
            )

    terminal = TerminalPrompt(provider, console=console)
    try:
        await terminal.start()
    finally:
        if gateway:
            await gateway.disconnect()


def run_cli(argv: Optional[List[str]] = None):
    """
    Parses command-line arguments and runs the interactive assistant.

    There are no options besides `--help`; everything else comes from the environment.

    Args:
        argv: A list of strings representing the command-line arguments.
              If None, `sys.argv[1:]` is used automatically by `parse_args`.
    """
    parser = argparse.ArgumentParser(
        description=DESCRIPTION, formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.parse_args(argv)

    configure_logging()
    try:
        config = get_config_from_env()
    except ConfigurationError as e:
        err_console.print(f"\n✗ Error: {e}\n", style="red", markup=False)
        sys.exit(1)
    _validate_ai_config(config)

    try:
        asyncio.run(_run(config))
    except KeyboardInterrupt:
        console.print("\n\n[cyan]Goodbye! 👋[/]\n")
        sys.exit(0)
    except Exception as e:
        log.exception("fatal_error")
        err_console.print(f"\n✗ Fatal error: {e}\n", style="red", markup=False)
        sys.exit(1)


def main():
    """The main entry point for the command-line interface, called by the `terminal-ai` script."""
    run_cli()


if __name__ == "__main__":
    main()
