import json
from unittest.mock import MagicMock

from terminal_ai.ai.llm import LLMClient, LLMCompletionResponse


def text_response(text):
    return LLMCompletionResponse(assistant_message={"role": "assistant", "content": text})


def suggestion_response(command="ls", explanation="List files", dangerous=False):
    return text_response(
        json.dumps({"command": command, "explanation": explanation, "dangerous": dangerous})
    )


def tool_call_response(name, arguments, call_id="toolu_1"):
    return LLMCompletionResponse(
        assistant_message={
            "role": "assistant",
            "tool_calls": [
                {
                    "id": call_id,
                    "type": "function",
                    "function": {"name": name, "arguments": json.dumps(arguments)},
                }
            ],
        }
    )


def mock_llm(*responses):
    """An LLMClient double whose `completion` returns the given responses in order."""
    llm = MagicMock(spec=LLMClient)
    llm.completion.side_effect = list(responses)
    return llm
