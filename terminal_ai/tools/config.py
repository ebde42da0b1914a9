import json
import os
from typing import Dict, List, Optional

from .gateway import MCPServerConfig
from ..logging import get_logger

log = get_logger(__name__)

CONFIG_FILE_NAME = "mcp.json"


def get_config_paths(cwd: Optional[str] = None, home: Optional[str] = None) -> List[str]:
    """The locations searched for an MCP config file, in priority order."""
    cwd = cwd or os.getcwd()
    home = home or os.path.expanduser("~")
    return [
        os.path.join(cwd, ".terminal-ai", CONFIG_FILE_NAME),
        os.path.join(cwd, CONFIG_FILE_NAME),
        os.path.join(home, ".terminal-ai", CONFIG_FILE_NAME),
        os.path.join(home, ".config", "terminal-ai", CONFIG_FILE_NAME),
    ]


def load_mcp_config(paths: Optional[List[str]] = None) -> Dict:
    """Loads the first readable config file. Broken files are skipped."""
    for path in paths if paths is not None else get_config_paths():
        if not os.path.exists(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as config_file:
                config = json.load(config_file)
            if not isinstance(config, dict):
                raise ValueError("top level must be a JSON object")
            return config
        except (OSError, ValueError) as e:
            log.warning("mcp_config_load_failed", path=path, error=str(e))

    return {"servers": []}


def get_default_mcp_servers(cwd: Optional[str] = None) -> List[MCPServerConfig]:
    """Built-in servers switched on through environment variables."""
    servers = []

    if os.environ.get("MCP_FILESYSTEM_ENABLED") == "true":
        servers.append(
            MCPServerConfig(
                name="filesystem",
                command="npx",
                args=["-y", "@modelcontextprotocol/server-filesystem", cwd or os.getcwd()],
            )
        )

    if os.environ.get("MCP_GIT_ENABLED") == "true":
        servers.append(
            MCPServerConfig(
                name="git",
                command="npx",
                args=["-y", "@modelcontextprotocol/server-git"],
            )
        )

    return servers


def get_mcp_servers(paths: Optional[List[str]] = None) -> List[MCPServerConfig]:
    config = load_mcp_config(paths)
    servers = []
    for entry in config.get("servers") or []:
        try:
            servers.append(MCPServerConfig.from_dict(entry))
        except (KeyError, TypeError) as e:
            log.warning("mcp_server_entry_invalid", entry=entry, error=str(e))
    return servers + get_default_mcp_servers()
