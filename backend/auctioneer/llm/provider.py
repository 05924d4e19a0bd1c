"""
LLM provider protocol definition.

WHAT: Abstract interface for chat-completion providers
WHY: Decouple the auction core from specific provider implementations
HOW: Use Protocol to define async methods for ping and generate
"""

from typing import Protocol
from .types import ChatMessage, LLMResult, ProviderStatus


class LLMProvider(Protocol):
    """Protocol defining the interface all LLM providers must implement."""
    
    async def ping(self) -> ProviderStatus:
        """Check provider health and availability."""
        ...
    
    async def generate(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        model: str | None = None
    ) -> LLMResult:
        """Generate a complete response (non-streaming)."""
        ...
