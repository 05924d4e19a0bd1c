"""
Integration tests for the full auction flow.

WHAT: Drive AuctionService through claim, address capture, settlement and notices
WHY: Verify chat/act/finalize wiring across conversations end to end
HOW: MockLLMProvider with scripted replies, recording settlement handler
"""

import pytest

from auctioneer.core.context_manager import ADDRESS_NUDGE, ContextManager
from auctioneer.llm.types import ProviderTimeoutError
from auctioneer.models.listing import ItemKey
from auctioneer.services.auction_service import CLEARED, GREETING, AuctionService
from auctioneer.utils.units import parse_ether
from tests.fixtures.auction_data import BUYER_ADDRESS, NFT_CONTRACT, make_item_args
from tests.fixtures.mock_llm import MockLLMProvider

CLOCK_KEY = ItemKey(id=1, chain=10, address=NFT_CONTRACT)


class RecordingSettlement:
    """Settlement handler that records claims, optionally failing."""
    
    def __init__(self, fail: bool = False):
        self.claims = []
        self.fail = fail
    
    async def __call__(self, claim):
        self.claims.append(claim)
        if self.fail:
            raise RuntimeError("escrow unavailable")


def make_service(responses, settlement=None):
    provider = MockLLMProvider(responses=responses)
    manager = ContextManager(provider, history_capacity=4)
    manager.add_nft(make_item_args())
    return AuctionService(manager, settlement), provider


@pytest.mark.integration
class TestAuctionFlow:
    """End-to-end sale across two conversations."""
    
    @pytest.mark.asyncio
    async def test_full_sale_with_cross_conversation_notice(self):
        settlement = RecordingSettlement()
        service, _ = make_service(
            [
                "Hi! I have a Clock for sale.",        # conversation 2 browses
                "SOLD Clock for 0.6 ETH!",             # conversation 1 claims
                f"Thank you, reserving offer for {BUYER_ADDRESS}",
                "Anything else I can help with?",      # conversation 2 again
            ],
            settlement
        )
        
        assert await service.handle_message(2, "What's for sale?") == "Hi! I have a Clock for sale."
        
        reply = await service.handle_message(1, "I'll pay 0.6 ETH for the Clock")
        assert reply == f"SOLD Clock for 0.6 ETH!\n{ADDRESS_NUDGE}"
        assert settlement.claims == []
        
        reply = await service.handle_message(1, BUYER_ADDRESS)
        assert reply == f"Thank you, reserving offer for {BUYER_ADDRESS}"
        assert len(settlement.claims) == 1
        assert settlement.claims[0].buyer == BUYER_ADDRESS
        assert settlement.claims[0].price == parse_ether("0.6")
        assert service.list_items() == []
        
        reply = await service.handle_message(2, "Still have that clock?")
        assert reply.startswith("Anything else I can help with?\n")
        assert "Clock" in reply.split("\n", 1)[1]
    
    @pytest.mark.asyncio
    async def test_prompt_switches_to_address_request_after_claim(self):
        service, provider = make_service(["SOLD Clock for 0.6 ETH!", "What's your address?"])
        
        await service.handle_message(1, "0.6 ETH")
        await service.handle_message(1, "ok")
        
        second_system = provider.calls[1]["messages"][0]["content"]
        assert "Thank you, reserving offer for " in second_system
        assert "min bid" not in second_system
    
    @pytest.mark.asyncio
    async def test_low_bid_keeps_browsing(self):
        service, provider = make_service(["SOLD Clock for 0.3 ETH!"])
        
        reply = await service.handle_message(1, "0.3?")
        
        assert reply == "SOLD Clock for 0.3 ETH!"
        assert service.manager.get_context(1).first_tentative_item() is None
    
    @pytest.mark.asyncio
    async def test_settlement_failure_keeps_item_listed(self):
        settlement = RecordingSettlement(fail=True)
        service, _ = make_service(["SOLD Clock for 0.6 ETH!", BUYER_ADDRESS], settlement)
        
        await service.handle_message(1, "0.6")
        await service.handle_message(1, BUYER_ADDRESS)
        
        assert len(settlement.claims) == 1
        assert CLOCK_KEY in service.manager.catalog
        assert service.manager.get_context(1).first_tentative_item() == CLOCK_KEY
    
    @pytest.mark.asyncio
    async def test_model_failure_drops_event(self):
        provider = MockLLMProvider(error=ProviderTimeoutError("timed out"))
        manager = ContextManager(provider)
        manager.add_nft(make_item_args())
        service = AuctionService(manager)
        
        assert await service.handle_message(1, "hello") is None
        assert CLOCK_KEY in manager.catalog
    
    @pytest.mark.asyncio
    async def test_start_and_clear_commands(self):
        service, provider = make_service(["SOLD Clock for 0.6 ETH!"])
        
        assert await service.handle_message(1, "/start") == GREETING
        await service.handle_message(1, "0.6")
        assert await service.handle_message(1, "/clear") == CLEARED
        
        assert provider.call_count == 1
        assert service.manager.get_context(1).first_tentative_item() is None
    
    @pytest.mark.asyncio
    async def test_external_sale_removes_item(self):
        service, _ = make_service(["SOLD Clock for 0.6 ETH!"])
        await service.handle_message(1, "0.6")
        
        service.handle_external_sale(CLOCK_KEY)
        
        assert service.list_items() == []
        assert service.manager.get_context(1).items == {}
        assert service.manager.additional_text(1) is None
