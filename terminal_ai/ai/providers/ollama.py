import json
from typing import Dict, List

import httpx

from ..llm import LLMClient
from ..provider import AIProvider, CommandSuggestion, build_system_prompt, extract_json_object
from ...config import DEFAULT_OLLAMA_HOST, DEFAULT_OLLAMA_MODEL
from ...exceptions import InvalidResponseFormatError, ResponseFormatError
from ...logging import get_logger

log = get_logger(__name__)


class OllamaProvider(AIProvider):
    """Suggests commands using a local Ollama server."""

    def __init__(
        self,
        llm: LLMClient,
        host: str = DEFAULT_OLLAMA_HOST,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: float = 10.0,
    ):
        super().__init__(llm)
        self.host = host.rstrip("/")
        self.model = model
        self.timeout = timeout

    async def get_suggestion(self, user_request: str, context: str) -> CommandSuggestion:
        self._append("user", user_request)

        # Ask Ollama to constrain the output to valid JSON.
        response = self.llm.completion(
            model=f"ollama:{self.model}",
            messages=self._build_messages(build_system_prompt(context)),
            format="json",
        )

        data = self._parse_json(response.content or "")
        if (
            not data.get("command")
            or not data.get("explanation")
            or data.get("dangerous") is None
        ):
            raise InvalidResponseFormatError("Invalid response format from AI")

        return self._record_suggestion(CommandSuggestion.from_dict(data))

    @staticmethod
    def _parse_json(text: str) -> Dict:
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = extract_json_object(text)
            if data is None:
                raise ResponseFormatError("Could not parse JSON response from AI")
        if not isinstance(data, dict):
            raise InvalidResponseFormatError("Invalid response format from AI")
        return data

    def is_available(self) -> bool:
        """Checks whether the Ollama server answers at all."""
        try:
            httpx.get(f"{self.host}/api/tags", timeout=self.timeout).raise_for_status()
            return True
        except httpx.HTTPError as e:
            log.warning("ollama_unavailable", host=self.host, error=str(e))
            return False

    def list_models(self) -> List[str]:
        response = httpx.get(f"{self.host}/api/tags", timeout=self.timeout)
        response.raise_for_status()
        return [model["name"] for model in response.json().get("models", [])]

    def pull_model(self) -> None:
        """Downloads the configured model. This can take a long time, so no timeout is applied."""
        response = httpx.post(
            f"{self.host}/api/pull",
            json={"model": self.model, "stream": False},
            timeout=None,
        )
        response.raise_for_status()
