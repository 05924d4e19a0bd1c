"""LLM provider layer."""

from .types import (
    ChatMessage,
    LLMResult,
    ProviderStatus,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderDisabledError,
    ProviderResponseError,
    PROVIDER_ERRORS,
)
from .provider import LLMProvider
from .provider_factory import get_provider, reset_provider

__all__ = [
    "ChatMessage",
    "LLMResult",
    "ProviderStatus",
    "ProviderTimeoutError",
    "ProviderUnavailableError",
    "ProviderDisabledError",
    "ProviderResponseError",
    "PROVIDER_ERRORS",
    "LLMProvider",
    "get_provider",
    "reset_provider",
]
