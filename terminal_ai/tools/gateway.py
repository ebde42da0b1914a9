from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from ..exceptions import ServerNotConnectedError, ToolNotFoundError
from ..logging import get_logger

log = get_logger(__name__)


@dataclass
class MCPServerConfig:
    name: str
    command: str
    args: List[str] = field(default_factory=list)
    env: Optional[Dict[str, str]] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "MCPServerConfig":
        return cls(
            name=data["name"],
            command=data["command"],
            args=list(data.get("args") or []),
            env=data.get("env"),
        )


@dataclass
class ToolDescriptor:
    name: str
    description: str
    input_schema: Dict
    server_name: str


@dataclass
class ServerConnection:
    name: str
    session: ClientSession
    exit_stack: AsyncExitStack


class MCPManager:
    """
    Owns the connections to the configured MCP servers and a flat registry of
    every tool they expose.

    Tool names are global: when two servers declare the same name, the server
    connected last wins.
    """

    def __init__(self, configs: Optional[List[MCPServerConfig]] = None):
        self.server_configs = list(configs or [])
        self._connections: Dict[str, ServerConnection] = {}
        self._tools: Dict[str, ToolDescriptor] = {}

    async def initialize(self):
        for config in self.server_configs:
            await self.connect_to_server(config)

    async def connect_to_server(self, config: MCPServerConfig):
        """Connects to a server and registers its tools. Failures are logged, never raised."""
        if config.name in self._connections:
            # Transports must close in reverse connect order, so a live connection
            # cannot be swapped out from under later ones.
            log.warning("mcp_server_already_connected", server=config.name)
            return

        exit_stack = AsyncExitStack()
        try:
            server_params = StdioServerParameters(
                command=config.command,
                args=config.args,
                env=config.env,
            )
            read, write = await exit_stack.enter_async_context(stdio_client(server_params))
            session = await exit_stack.enter_async_context(ClientSession(read, write))
            await session.initialize()

            tools_list = await session.list_tools()
        except Exception as e:
            log.warning("mcp_connect_failed", server=config.name, error=str(e))
            await self._close_quietly(config.name, exit_stack)
            return

        self._connections[config.name] = ServerConnection(config.name, session, exit_stack)

        for tool in tools_list.tools:
            previous = self._tools.get(tool.name)
            if previous and previous.server_name != config.name:
                log.warning(
                    "mcp_tool_overridden",
                    tool=tool.name,
                    previous_server=previous.server_name,
                    server=config.name,
                )
            self._tools[tool.name] = ToolDescriptor(
                name=tool.name,
                description=tool.description or "",
                input_schema=tool.inputSchema,
                server_name=config.name,
            )
        log.info("mcp_connected", server=config.name, tools=len(tools_list.tools))

    async def call_tool(self, tool_name: str, args: Dict) -> Any:
        tool = self._tools.get(tool_name)
        if not tool:
            raise ToolNotFoundError(tool_name)

        connection = self._connections.get(tool.server_name)
        if not connection:
            raise ServerNotConnectedError(tool.server_name)

        return await connection.session.call_tool(tool_name, arguments=args)

    def get_available_tools(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    def get_tool(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def is_connected(self, server_name: str) -> bool:
        return server_name in self._connections

    def get_connected_servers(self) -> List[str]:
        return list(self._connections.keys())

    async def disconnect(self):
        try:
            # Each stdio transport holds a cancel scope, so close newest first.
            for name, connection in reversed(list(self._connections.items())):
                await self._close_quietly(name, connection.exit_stack)
        finally:
            self._connections.clear()
            self._tools.clear()

    @staticmethod
    async def _close_quietly(name: str, exit_stack: AsyncExitStack):
        try:
            await exit_stack.aclose()
        except Exception as e:
            log.warning("mcp_close_failed", server=name, error=str(e))
