"""
OpenAI-compatible chat-completions provider.

WHAT: Chat completions against OpenAI or any OpenAI-compatible server (LM Studio)
WHY: The auctioneer needs one bounded model call per inbound message
HOW: HTTPX async client, single attempt with a fixed timeout, errors mapped to provider exceptions
"""

import json

import httpx

from .types import (
    ChatMessage,
    LLMResult,
    ProviderStatus,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderResponseError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


class OpenAICompatibleProvider:
    """Chat-completions provider; no retries, the caller decides what to do on failure."""
    
    def __init__(
        self,
        base_url: str,
        default_model: str,
        *,
        api_key: str | None = None,
        timeout: float = 10.0
    ):
        """
        Initialize provider with an httpx client.
        
        Args:
            base_url: API root, e.g. https://api.openai.com/v1
            default_model: Model used when generate() gets none
            api_key: Bearer token (omit for local servers)
            timeout: Read timeout in seconds for a single request
        """
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout
        
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(5.0, read=timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            headers=headers,
        )
    
    async def ping(self) -> ProviderStatus:
        """
        Check availability by listing models.
        
        Returns:
            ProviderStatus with availability and model list
        """
        try:
            response = await self.client.get(f"{self.base_url}/models", timeout=5.0)
            response.raise_for_status()
            data = response.json()
            
            models = [m.get("id") for m in data.get("data", [])]
            
            return ProviderStatus(
                available=True,
                base_url=self.base_url,
                models=models if models else None
            )
        except httpx.TimeoutException:
            logger.warning(f"Ping to {self.base_url} timed out")
            return ProviderStatus(
                available=False,
                base_url=self.base_url,
                error="Connection timeout"
            )
        except httpx.ConnectError:
            logger.warning(f"{self.base_url} not reachable")
            return ProviderStatus(
                available=False,
                base_url=self.base_url,
                error="Connection refused"
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Ping to {self.base_url} failed: {e}")
            return ProviderStatus(
                available=False,
                base_url=self.base_url,
                error=str(e)
            )
    
    async def generate(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        model: str | None = None
    ) -> LLMResult:
        """
        Generate complete response (non-streaming).
        
        Args:
            messages: System prompt followed by conversation history
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            model: Optional model name (uses default_model if not provided)
        
        Returns:
            LLMResult with text, usage, and model
        
        Raises:
            ProviderTimeoutError: Request exceeded the timeout
            ProviderUnavailableError: Server not reachable
            ProviderResponseError: Error status or malformed body
        """
        model_to_use = model or self.default_model
        payload = {
            "model": model_to_use,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        
        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload
            )
            response.raise_for_status()
            data = response.json()
            text = data["choices"][0]["message"]["content"]
        except httpx.TimeoutException as e:
            logger.warning(f"Chat completion timed out after {self.timeout}s")
            raise ProviderTimeoutError(f"Request timed out after {self.timeout}s") from e
        except httpx.ConnectError as e:
            logger.error(f"{self.base_url} connection refused")
            raise ProviderUnavailableError(f"{self.base_url} is not reachable") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Chat completion HTTP error {e.response.status_code}")
            raise ProviderResponseError(f"HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.TransportError as e:
            logger.error(f"Chat completion transport error: {e}")
            raise ProviderUnavailableError(f"Transport error: {e}") from e
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
            logger.error(f"Invalid chat completion response: {e}")
            raise ProviderResponseError(f"Invalid response format: {e}") from e
        
        if not isinstance(text, str):
            raise ProviderResponseError("Response content is not text")
        
        usage = data.get("usage", {})
        response_model = data.get("model", model_to_use)
        logger.info(f"Chat completion success (model: {response_model}, tokens: {usage.get('total_tokens', 'unknown')})")
        
        return LLMResult(text=text, usage=usage, model=response_model)
    
    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
