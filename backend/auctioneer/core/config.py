"""
Application configuration using pydantic-settings.

WHAT: Centralized config from environment variables
WHY: Type-safe, validated config with sensible defaults
HOW: Pydantic BaseSettings reads from .env and environment
"""

from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Literal
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    # App metadata
    APP_NAME: str = "NFT Auctioneer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    
    # LLM Provider Selection
    LLM_PROVIDER: Literal["openai", "lm_studio"] = "openai"
    
    # OpenAI Configuration
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_API_KEY: str = ""
    OPENAI_DEFAULT_MODEL: str = "gpt-4-1106-preview"
    
    # LM Studio Configuration (local, OpenAI-compatible)
    LM_STUDIO_BASE_URL: str = "http://localhost:1234/v1"
    LM_STUDIO_DEFAULT_MODEL: str = "qwen/qwen3-1.7b"
    
    # LLM Request Configuration
    LLM_TIMEOUT: int = 10  # seconds, single attempt
    LLM_DEFAULT_TEMPERATURE: float = 0.2
    LLM_DEFAULT_MAX_TOKENS: int = 150  # kept low, replies are terse
    
    # Auction Configuration
    CHAT_HISTORY_CAPACITY: int = 4
    
    @field_validator("CHAT_HISTORY_CAPACITY")
    @classmethod
    def validate_history_capacity(cls, v: int) -> int:
        """History buffer needs room for at least one message."""
        if v < 1:
            raise ValueError("CHAT_HISTORY_CAPACITY must be >= 1")
        return v
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./data/logs/auctioneer.log"
    
    # Persistence
    STATE_FILE: str = "./data/state/auctioneer.json"
    
    class Config:
        # Look for .env in project root first, then backend/.env
        env_file = [
            str(Path(__file__).parent.parent.parent.parent / ".env"),
            str(Path(__file__).parent.parent.parent / ".env"),
        ]
        env_file_encoding = "utf-8"
        case_sensitive = True


# Singleton instance
settings = Settings()
