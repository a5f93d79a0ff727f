"""
Base translation backend interface.
All translation providers must inherit from TranslationBackend.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
from dataclasses import dataclass, field


@dataclass
class TranslationRequest:
    """One provider call: a system instruction block plus a user message."""
    system_prompt: str
    user_prompt: str
    max_tokens: int = 8192
    temperature: Optional[float] = None


@dataclass
class TranslationResponse:
    """Raw provider output, parsed later by the batch translator."""
    text: str
    backend: str
    model: str
    tokens_used: int = 0
    latency: float = 0.0
    finish_reason: Optional[str] = None  # "end_turn", "max_tokens", ...
    metadata: Dict = field(default_factory=dict)


class TranslationBackend(ABC):
    """Abstract base class for translation backends."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key
        self.model = model
        self.name = self.__class__.__name__

    @abstractmethod
    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """
        Send one request to the provider.

        Args:
            request: System and user prompts for the call

        Returns:
            TranslationResponse with the raw text payload

        Raises:
            BackendError: On network, auth or provider-side failure
        """
        pass

    def is_available(self) -> bool:
        """Check if backend is available and configured."""
        return self.api_key is not None

    def get_info(self) -> Dict:
        """Get backend information."""
        return {
            "name": self.name,
            "model": self.model,
            "available": self.is_available()
        }

    async def close(self) -> None:
        """Release network resources held by the backend."""
        return None
