"""Local inference service provider (Ollama REST API)."""

import logging

import httpx

from issuedraft.ai.base import DraftModel
from issuedraft.errors import AIRequestFailed

logger = logging.getLogger(__name__)


class OllamaModel(DraftModel):
    """Prompt in, text out, with a numeric creativity knob mapped to temperature."""

    name = "Local AI"

    def __init__(self, host: str, model: str, creativity: float = 0.3, timeout: float = 30) -> None:
        self.host = host.rstrip("/")
        self.model = model
        self.creativity = creativity
        self.timeout = timeout
        self._endpoint = f"{self.host}/api/generate"

    async def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.creativity},
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self._endpoint, json=payload)
        except httpx.HTTPError as exc:
            raise AIRequestFailed(self.name, detail=str(exc)) from exc

        if not response.is_success:
            raise AIRequestFailed(self.name, response.status_code)

        try:
            text = response.json().get("response") or ""
        except (ValueError, AttributeError) as exc:
            raise AIRequestFailed(self.name, response.status_code, "invalid response body") from exc
        logger.debug("local AI returned %d characters", len(text))
        return text
