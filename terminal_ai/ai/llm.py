from dataclasses import dataclass
import aisuite

from typing import Dict, List, Optional


@dataclass
class LLMCompletionResponse:
    """Wraps the full assistant message from the LLM API."""

    assistant_message: Dict

    @property
    def content(self) -> Optional[str]:
        """The text content of the message, if any."""
        return self.assistant_message.get("content")

    @property
    def tool_calls(self) -> Optional[List[Dict]]:
        """The list of tool calls requested by the LLM, if any."""
        return self.assistant_message.get("tool_calls")


class LLMClient:
    """
    A wrapper for the LLM client to abstract away the specific provider library.
    Both the hosted (Anthropic) and the local (Ollama) backends go through it.
    """

    def __init__(self, provider_configs: Dict):
        """
        Initializes the LLM client.

        Args:
            provider_configs: A dictionary keyed by aisuite provider name
                (e.g. "anthropic", "ollama") with that provider's settings.
        """
        self.client = aisuite.Client(provider_configs)

    @staticmethod
    def format_system_message(content: str) -> Dict:
        return {"role": "system", "content": content}

    @staticmethod
    def format_tool(name: str, description: str, input_schema: Dict) -> Dict:
        # Tools are declared in the OpenAI function format; aisuite converts them
        # for the target provider.
        return {
            "type": "function",
            "function": {
                "name": name,
                "description": description,
                "parameters": input_schema,
            },
        }

    def completion(
        self,
        model: str,
        messages: List[Dict],
        tools: Optional[List[Dict]] = None,
        **kwargs
    ) -> LLMCompletionResponse:
        if tools:
            kwargs["tools"] = tools
        response = self.client.chat.completions.create(
            model=model, messages=messages, **kwargs
        )

        # The message object from aisuite can be converted to a dict.
        # We exclude unset values to keep the payload clean.
        message_dict = response.choices[0].message.model_dump(exclude_unset=True)
        return LLMCompletionResponse(assistant_message=message_dict)
