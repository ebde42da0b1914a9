from ..llm import LLMClient, LLMCompletionResponse
from ..provider import AIProvider, CommandSuggestion, build_system_prompt
from ...exceptions import ResponseFormatError
from ...logging import get_logger

log = get_logger(__name__)

ANTHROPIC_MODEL = "anthropic:claude-sonnet-4-5-20250929"


class AnthropicProvider(AIProvider):
    """Suggests commands using the hosted Anthropic API."""

    max_tokens = 1024

    def __init__(self, llm: LLMClient, model: str = ANTHROPIC_MODEL):
        super().__init__(llm)
        self.model = model

    async def get_suggestion(self, user_request: str, context: str) -> CommandSuggestion:
        self._append("user", user_request)

        response = self._complete(build_system_prompt(context))
        suggestion = self._parse_response(response)
        return self._record_suggestion(suggestion)

    def _complete(self, system_prompt: str, **kwargs) -> LLMCompletionResponse:
        log.debug("llm_request", model=self.model, history=len(self._history))
        return self.llm.completion(
            model=self.model,
            messages=self._build_messages(system_prompt),
            max_tokens=self.max_tokens,
            **kwargs
        )

    def _parse_response(self, response: LLMCompletionResponse) -> CommandSuggestion:
        text = response.content
        if not isinstance(text, str):
            raise ResponseFormatError("Unexpected response type from AI")
        return self._parse_embedded_suggestion(text)
