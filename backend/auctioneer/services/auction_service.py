"""
Auction message handling for a chat host.

WHAT: Turn one inbound chat message into the outbound reply text
WHY: Hosts (chat bots, tests) need chat, act, settlement and notices wired in order
HOW: chat() -> act() -> settle + finalize_and_remove -> append additional_text
"""

from typing import Protocol

from ..core.context_manager import ContextManager
from ..models.commands import FinalizedClaim
from ..models.listing import ItemKey, ListingSummary
from ..utils.exceptions import ModelUnavailableException
from ..utils.logger import get_logger
from ..utils.units import format_ether

logger = get_logger(__name__)

START_COMMAND = "/start"
CLEAR_COMMAND = "/clear"

GREETING = "I'm an auctioneer, I can tell you about the NFTs I have for sale currently."
CLEARED = "Conversation cleared. What would you like to buy?"


class SettlementHandler(Protocol):
    """Performs the external sale (e.g. an on-chain listing) for a finalized claim."""
    
    async def __call__(self, claim: FinalizedClaim) -> None:
        ...


async def log_settlement(claim: FinalizedClaim) -> None:
    """Default settlement: record the claim for an operator to act on."""
    logger.info(
        f"Settlement requested: item {claim.item.id} on chain {claim.item.chain} "
        f"({claim.item.address}) to {claim.buyer} for {format_ether(claim.price)} ETH"
    )


class AuctionService:
    """Processes inbound messages one at a time against a ContextManager."""
    
    def __init__(self, manager: ContextManager, settlement: SettlementHandler | None = None):
        self.manager = manager
        self.settlement = settlement or log_settlement
    
    async def handle_message(self, conversation_id: int, text: str) -> str | None:
        """
        Handle one inbound message.
        
        Args:
            conversation_id: Chat identifier
            text: Message text
        
        Returns:
            Reply to send, or None if the model was unavailable (event dropped)
        """
        command = text.strip()
        if command == START_COMMAND:
            return GREETING
        if command == CLEAR_COMMAND:
            self.manager.clear(conversation_id)
            return CLEARED
        
        try:
            reply = await self.manager.chat(conversation_id, text)
        except ModelUnavailableException as e:
            logger.error(f"Dropping message for conversation {conversation_id}: {e.message}")
            return None
        
        claim = self.manager.act(conversation_id, reply)
        if claim is not None:
            await self._settle(claim, conversation_id)
        
        extra = self.manager.additional_text(conversation_id)
        return f"{reply}\n{extra}" if extra else reply
    
    async def _settle(self, claim: FinalizedClaim, conversation_id: int) -> None:
        try:
            await self.settlement(claim)
        except Exception as e:
            # Claim stays tentative; the next act() finalizes it again
            logger.error(f"Settlement failed for conversation {conversation_id}: {e}")
            return
        self.manager.finalize_and_remove(claim.item, conversation_id)
    
    def handle_external_sale(self, key: ItemKey) -> None:
        """Delist an item sold outside any conversation."""
        logger.info(f"External sale reported for item {key.id} on chain {key.chain}")
        self.manager.remove_nft(key)
    
    def list_items(self) -> list[ListingSummary]:
        return self.manager.list_items()
