import json
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..llm import LLMClient
from ..provider import CommandSuggestion, build_system_prompt
from .anthropic import ANTHROPIC_MODEL, AnthropicProvider
from ...exceptions import ToolLoopExceededError
from ...logging import get_logger

if TYPE_CHECKING:
    from ...tools.gateway import MCPManager

log = get_logger(__name__)

DEFAULT_MAX_TOOL_TURNS = 10


def _serialize_tool_content(result: Any) -> str:
    content = getattr(result, "content", result)
    if isinstance(content, list):
        content = [
            block.model_dump(mode="json") if hasattr(block, "model_dump") else block
            for block in content
        ]
    return json.dumps(content, default=str)


class AnthropicToolsProvider(AnthropicProvider):
    """
    An Anthropic provider that lets the model call MCP tools before answering.

    While the model keeps asking for a tool, the call is forwarded to the attached
    `MCPManager`, the exchange is added to the history and the model is asked again.
    """

    max_tokens = 2048

    def __init__(
        self,
        llm: LLMClient,
        model: str = ANTHROPIC_MODEL,
        max_tool_turns: int = DEFAULT_MAX_TOOL_TURNS,
    ):
        super().__init__(llm, model)
        if max_tool_turns <= 0:
            raise ValueError("max_tool_turns must be a positive integer.")
        self.max_tool_turns = max_tool_turns
        self.gateway: Optional["MCPManager"] = None

    def set_tool_gateway(self, gateway: "MCPManager"):
        self.gateway = gateway

    def has_tool_support(self) -> bool:
        return self.gateway is not None

    def _get_tools(self) -> List[Dict]:
        if not self.gateway:
            return []
        return [
            LLMClient.format_tool(tool.name, tool.description, tool.input_schema)
            for tool in self.gateway.get_available_tools()
        ]

    async def get_suggestion(self, user_request: str, context: str) -> CommandSuggestion:
        self._append("user", user_request)

        tools = self._get_tools()
        system_prompt = build_system_prompt(context, with_tools=bool(tools))
        used_tools: List[str] = []

        response = self._complete(system_prompt, tools=tools)

        while response.tool_calls:
            if not self.gateway:
                # The model asked for a tool but there is nobody to run it.
                break
            if len(used_tools) >= self.max_tool_turns:
                raise ToolLoopExceededError(self.max_tool_turns)

            tool_call = response.tool_calls[0]
            tool_name = tool_call["function"]["name"]
            tool_args = json.loads(tool_call["function"].get("arguments") or "{}")
            used_tools.append(tool_name)

            log.info("tool_called", tool=tool_name)
            result = await self.gateway.call_tool(tool_name, tool_args)

            self._append("assistant", json.dumps(response.tool_calls))
            self._append(
                "user",
                json.dumps(
                    {
                        "type": "tool_result",
                        "tool_use_id": tool_call["id"],
                        "content": _serialize_tool_content(result),
                    }
                ),
            )

            response = self._complete(system_prompt, tools=tools)

        suggestion = self._parse_response(response)
        if used_tools:
            suggestion.used_tools = used_tools
        return self._record_suggestion(suggestion)
