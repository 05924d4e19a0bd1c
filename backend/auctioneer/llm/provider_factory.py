"""
LLM provider factory with singleton pattern.

WHAT: Factory to get the configured LLM provider
WHY: Centralize provider selection and avoid multiple HTTP clients
HOW: Read LLM_PROVIDER from config, cache singleton, log selection
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .provider import LLMProvider

# Singleton instance
_provider_instance: "LLMProvider | None" = None


def get_provider() -> "LLMProvider":
    """
    Get the configured LLM provider singleton.
    
    Returns:
        LLMProvider instance based on settings.LLM_PROVIDER
    
    Raises:
        ProviderDisabledError: If OpenAI is selected without an API key
        ValueError: If provider name is unknown
    """
    global _provider_instance
    
    if _provider_instance is None:
        # Import here to avoid circular dependencies
        from ..core.config import settings
        from ..utils.logger import get_logger
        from .openai_compat import OpenAICompatibleProvider
        from .types import ProviderDisabledError
        
        logger = get_logger(__name__)
        provider_name = settings.LLM_PROVIDER
        
        if provider_name == "openai":
            if not settings.OPENAI_API_KEY or not settings.OPENAI_API_KEY.strip():
                raise ProviderDisabledError(
                    "OPENAI_API_KEY is not set. Set it in your environment or .env file."
                )
            _provider_instance = OpenAICompatibleProvider(
                settings.OPENAI_BASE_URL,
                settings.OPENAI_DEFAULT_MODEL,
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.LLM_TIMEOUT,
            )
        elif provider_name == "lm_studio":
            _provider_instance = OpenAICompatibleProvider(
                settings.LM_STUDIO_BASE_URL,
                settings.LM_STUDIO_DEFAULT_MODEL,
                timeout=settings.LLM_TIMEOUT,
            )
        else:
            raise ValueError(f"Unknown LLM provider: {provider_name}")
        
        logger.info(f"LLM provider initialized: {provider_name}")
    
    return _provider_instance


def reset_provider() -> None:
    """Reset the provider singleton (useful for testing)."""
    global _provider_instance
    _provider_instance = None
