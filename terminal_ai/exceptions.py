"""Custom exceptions for terminal-ai."""


class TerminalAIError(Exception):
    """Base exception for terminal-ai."""

    pass


class ConfigurationError(TerminalAIError):
    """Missing or invalid provider configuration."""

    pass


class ResponseFormatError(TerminalAIError):
    """The AI backend replied with something that is not a usable suggestion."""

    pass


class InvalidResponseFormatError(ResponseFormatError):
    """The reply parsed as JSON but is missing required fields."""

    pass


class ToolError(TerminalAIError):
    """Tool dispatch errors."""

    pass


class ToolNotFoundError(ToolError):
    """Tool not found in the gateway registry."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool {tool_name} not found")
        self.tool_name = tool_name


class ServerNotConnectedError(ToolError):
    """The server owning a tool has no live connection."""

    def __init__(self, server_name: str):
        super().__init__(f"MCP server {server_name} not connected")
        self.server_name = server_name


class ToolLoopExceededError(ToolError):
    """The backend kept requesting tools past the allowed number of turns."""

    def __init__(self, max_turns: int):
        super().__init__(f"AI requested more than {max_turns} tool calls for one request")
        self.max_turns = max_turns
