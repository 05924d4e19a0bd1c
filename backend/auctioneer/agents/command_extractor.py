"""
Command extraction from auctioneer replies.

WHAT: Turn free-text model output into at most one auction command
WHY: The model negotiates in prose; only marker phrases may change sale state
HOW: Literal SOLD-marker parsing first, then a regex scan for an ETH address
"""

import re
from typing import TYPE_CHECKING, Protocol

from .prompts import SOLD_DELIMITER, SOLD_PREFIX, SOLD_SUFFIX
from ..models.commands import Command, LinkBuyerIdentity, TentativeClaim
from ..utils.exceptions import InvalidAmountException
from ..utils.logger import get_logger
from ..utils.units import parse_ether

if TYPE_CHECKING:
    from ..core.conversation import ConversationContext

logger = get_logger(__name__)

# Exactly 40 hex digits; longer hex runs are not addresses
ADDRESS_PATTERN = re.compile(r'0x[a-fA-F0-9]{40}(?![a-fA-F0-9])')
_ADDRESS_CANDIDATE = re.compile(r'0x[a-fA-F0-9][a-zA-Z0-9]*')


class CommandExtractor(Protocol):
    """Anything that maps (conversation, reply) to an optional command."""
    
    def extract(self, context: "ConversationContext", reply: str) -> Command | None:
        ...


class MarkerCommandExtractor:
    """Extractor for the SOLD passkey and ETH-address-anywhere conventions."""
    
    def extract(self, context: "ConversationContext", reply: str) -> Command | None:
        """
        Extract a command from a model reply.
        
        Claim detection runs first so a single reply never both claims and links.
        
        Args:
            context: Conversation the reply belongs to
            reply: Raw model reply
        
        Returns:
            TentativeClaim, LinkBuyerIdentity, or None
        """
        if not reply:
            return None
        return self.parse_claim(context, reply) or self.parse_address_link(context, reply)
    
    def parse_claim(self, context: "ConversationContext", reply: str) -> TentativeClaim | None:
        """Parse 'SOLD <name> for <amount> ETH!' against the conversation's items."""
        text = reply.strip()
        if not text.startswith(SOLD_PREFIX + " "):
            return None
        
        parts = text.split(SOLD_DELIMITER)
        if len(parts) != 2:
            logger.debug(f"SOLD reply without a single '{SOLD_DELIMITER.strip()}' delimiter: {text!r}")
            return None
        
        item_name = parts[0][len(SOLD_PREFIX) + 1:]
        amount_text = parts[1].removesuffix(SOLD_SUFFIX)
        
        try:
            amount = parse_ether(amount_text)
        except InvalidAmountException as e:
            logger.debug(f"Ignoring SOLD reply with bad amount: {e.message}")
            return None
        
        match = context.find_item_by_name(item_name)
        if match is None:
            logger.debug(f"Ignoring SOLD reply for unknown item {item_name!r}")
            return None
        
        key, tracked = match
        if amount < tracked.listing.min_price:
            logger.info(f"Bid of {amount_text} ETH on {item_name} is below the minimum, not claiming")
            return None
        
        logger.info(f"Tentative claim detected: {item_name} for {amount_text} ETH")
        return TentativeClaim(item=key, price=amount)
    
    def parse_address_link(self, context: "ConversationContext", reply: str) -> LinkBuyerIdentity | None:
        """Link the first ETH address in the reply to the conversation's claimed item."""
        match = ADDRESS_PATTERN.search(reply)
        if match is None:
            malformed = _ADDRESS_CANDIDATE.findall(reply)
            if malformed:
                logger.debug(f"Ignoring malformed address candidate(s): {malformed}")
            return None
        
        key = context.first_tentative_item()
        if key is None:
            logger.debug("Address found but nothing is tentatively claimed")
            return None
        
        address = match.group(0)
        logger.info(f"Buyer address {address} linked to claim on {context.items[key].listing.name}")
        return LinkBuyerIdentity(item=key, buyer=address)
