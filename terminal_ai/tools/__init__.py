"""
The `tools` package connects to external MCP tool servers and exposes their tools
to the AI providers.
"""

from .config import get_mcp_servers, load_mcp_config
from .gateway import MCPManager, MCPServerConfig, ToolDescriptor

__all__ = ["MCPManager", "MCPServerConfig", "ToolDescriptor", "get_mcp_servers", "load_mcp_config"]
