import json

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .llm import LLMClient
from ..exceptions import ResponseFormatError

SYSTEM_PROMPT_PREAMBLE = (
    "You are a helpful terminal assistant. The user will describe what they want to do, "
    "and you should respond with the appropriate shell command."
)

TOOLS_PROMPT = """
You have access to MCP tools that can help you gather information or perform operations. \
Use these tools when needed to provide better command suggestions."""

OUTPUT_FORMAT_PROMPT = """
IMPORTANT: Respond in JSON format with the following structure:
{
  "command": "the actual shell command to run",
  "explanation": "brief explanation of what the command does",
  "dangerous": true/false (true if the command can modify/delete files or system settings)
}

Only respond with the JSON object, nothing else. Be concise but clear in your explanations."""

REQUIRED_FIELDS = ("command", "explanation", "dangerous")


@dataclass(frozen=True)
class Message:
    """A single entry of the conversation history."""

    role: str
    content: str

    def to_dict(self) -> Dict:
        return {"role": self.role, "content": self.content}


@dataclass
class CommandSuggestion:
    """Represents a command suggestion from the AI, including metadata."""

    command: str
    explanation: str
    dangerous: bool
    used_tools: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "CommandSuggestion":
        return cls(
            command=data["command"],
            explanation=data["explanation"],
            dangerous=bool(data["dangerous"]),
            used_tools=data.get("used_tools"),
        )

    def to_dict(self) -> Dict:
        data: Dict[str, Any] = {
            "command": self.command,
            "explanation": self.explanation,
            "dangerous": self.dangerous,
        }
        if self.used_tools:
            data["used_tools"] = list(self.used_tools)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def extract_json_object(text: str) -> Optional[Dict]:
    """
    Finds the first JSON object embedded in `text`.

    Every `{` is tried as the start of a JSON value and decoded with the real JSON
    decoder, so nested objects and braces inside strings are handled correctly.
    Surrounding prose or markdown code fences are ignored.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)
    return None


def build_system_prompt(context: str, with_tools: bool = False) -> str:
    prompt = f"{SYSTEM_PROMPT_PREAMBLE}\n\nCurrent context:\n{context}\n"
    if with_tools:
        prompt += TOOLS_PROMPT + "\n"
    return prompt + OUTPUT_FORMAT_PROMPT


class AIProvider(ABC):
    """
    Turns a natural language request into a `CommandSuggestion`.

    Every provider owns its conversation history: the user request is appended
    before the backend is called, and the serialized suggestion is appended once
    the reply was parsed successfully.
    """

    def __init__(self, llm: LLMClient):
        self.llm = llm
        self._history: List[Message] = []

    @abstractmethod
    async def get_suggestion(self, user_request: str, context: str) -> CommandSuggestion:
        pass

    def clear_history(self) -> None:
        self._history = []

    def get_history(self) -> List[Message]:
        return list(self._history)

    def _append(self, role: str, content: str):
        self._history.append(Message(role=role, content=content))

    def _build_messages(self, system_prompt: str) -> List[Dict]:
        return [LLMClient.format_system_message(system_prompt)] + [
            message.to_dict() for message in self._history
        ]

    def _record_suggestion(self, suggestion: CommandSuggestion) -> CommandSuggestion:
        self._append("assistant", suggestion.to_json())
        return suggestion

    @staticmethod
    def _parse_embedded_suggestion(text: str) -> CommandSuggestion:
        data = extract_json_object(text)
        if data is None or any(field not in data for field in REQUIRED_FIELDS):
            raise ResponseFormatError("Could not parse JSON response from AI")
        return CommandSuggestion.from_dict(data)
