"""OpenAI chat-completions provider."""

import logging

import httpx

from issuedraft.ai.base import DraftModel
from issuedraft.errors import AIRequestFailed

logger = logging.getLogger(__name__)

ENDPOINT = "https://api.openai.com/v1/chat/completions"


class OpenAIChatModel(DraftModel):
    name = "OpenAI"

    def __init__(self, api_key: str, model: str = "gpt-4.1-mini", temperature: float = 0.2, timeout: float = 30) -> None:
        self._api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    async def complete(self, prompt: str) -> str:
        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    ENDPOINT,
                    json=body,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as exc:
            raise AIRequestFailed(self.name, detail=str(exc)) from exc

        if not response.is_success:
            raise AIRequestFailed(self.name, response.status_code)

        try:
            choices = response.json().get("choices") or [{}]
            text = (choices[0].get("message") or {}).get("content") or ""
        except (ValueError, AttributeError, LookupError, TypeError) as exc:
            raise AIRequestFailed(self.name, response.status_code, "invalid response body") from exc
        logger.debug("OpenAI returned %d characters", len(text))
        return text
