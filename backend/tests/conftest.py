"""
Pytest configuration and shared fixtures for backend tests.

WHAT: Centralized test configuration with markers and auction fixtures
WHY: Enable test organization, filtering, and shared test utilities
HOW: Define pytest markers, fixtures, and test helpers
"""

import pytest

from auctioneer.core.context_manager import ContextManager
from auctioneer.llm.provider_factory import reset_provider
from auctioneer.models.listing import AddItemArgs
from tests.fixtures.auction_data import make_item_args
from tests.fixtures.mock_llm import MockLLMProvider


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (isolated component tests)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (multiple components)"
    )


@pytest.fixture(autouse=True)
def reset_provider_singleton():
    """
    Reset provider singleton before each test.
    
    WHAT: Clear provider cache between tests
    WHY: Prevent test pollution and ensure clean state
    HOW: Call reset_provider() before and after each test
    """
    reset_provider()
    yield
    reset_provider()


@pytest.fixture
def clock_args() -> AddItemArgs:
    return make_item_args()


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def manager(mock_provider, clock_args) -> ContextManager:
    """ContextManager with a single 'Clock' listing at 0.5 ETH."""
    manager = ContextManager(mock_provider, history_capacity=4)
    manager.add_nft(clock_args)
    return manager
