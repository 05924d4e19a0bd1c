"""
Tests for logging and settings configuration.

WHAT: Test setup_logging handlers and settings validation
WHY: Auction events must reach the log file; bad config must fail early
HOW: Configure logging into tmp_path, restore root handlers afterwards
"""

import logging

import pytest
from pydantic import ValidationError

from auctioneer.core.config import Settings
from auctioneer.utils.logger import get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestLogging:
    """Test setup_logging/get_logger."""
    
    def test_setup_logging_writes_file(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "auctioneer.log"
        
        setup_logging(str(log_file))
        get_logger("auctioneer.test").warning("claim recorded")
        for handler in logging.getLogger().handlers:
            handler.flush()
        
        assert log_file.exists()
        assert "claim recorded" in log_file.read_text()
        assert len(logging.getLogger().handlers) == 2
    
    def test_get_logger_name(self):
        assert get_logger("auctioneer.core").name == "auctioneer.core"


@pytest.mark.unit
class TestSettings:
    """Test settings defaults and validation."""
    
    def test_defaults(self):
        settings = Settings(_env_file=None)
        
        assert settings.CHAT_HISTORY_CAPACITY == 4
        assert settings.LLM_TIMEOUT == 10
        assert settings.OPENAI_DEFAULT_MODEL == "gpt-4-1106-preview"
    
    def test_history_capacity_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CHAT_HISTORY_CAPACITY=0)
