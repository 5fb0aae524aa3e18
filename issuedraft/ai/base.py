"""Abstract base class for generative text providers."""

from abc import ABC, abstractmethod


class DraftModel(ABC):
    name: str = "AI"

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send one prompt and return the raw response text."""
