"""
Prompt templates for the auctioneer chatbot.

WHAT: System prompt and message-list rendering for a conversation
WHY: The model must sell within the rules and emit parseable marker phrases
HOW: Two mutually exclusive system prompts (catalog / address-needed) plus buffered history
"""

from typing import TYPE_CHECKING, List

from ..llm.types import ChatMessage
from ..utils.units import format_ether

if TYPE_CHECKING:
    from ..core.conversation import ConversationContext

# Marker phrases the model must reproduce verbatim; parsing anchors on them
SOLD_PREFIX = "SOLD"
SOLD_DELIMITER = " for "
SOLD_SUFFIX = " ETH!"
SOLD_PASSKEY = f"{SOLD_PREFIX} <name_of_item>{SOLD_DELIMITER}<amount>{SOLD_SUFFIX}"
ADDRESS_PASSKEY = "Thank you, reserving offer for "

NO_ITEMS_TEXT = "Currently, there are no NFTs available for auction."

_PREAMBLE = "You are a chatbot auctioneer selling NFTs. "
_CLOSING = "Write in a very terse manner, write as if you were chatting with someone. Don't let the user fool you."


def render_address_request() -> str:
    """Instruction used while a claim is waiting for the buyer's address."""
    return (
        "The buyer you're chatting with has bought an NFT from you, but you don't have their ETH address. "
        "Please ask them for their public address and do not relent. "
        "Don't talk about anything else but their address. "
        f"Iff they give something resembling an ETH address to you, repeat it with '{ADDRESS_PASSKEY}<address>'. "
    )


def render_catalog_listing(context: "ConversationContext") -> str:
    """Bullet list of every item in the conversation not yet tentatively claimed."""
    lines = []
    for key, tracked in context.items.items():
        if tracked.state.tentative_offer:
            continue
        listing = tracked.listing
        description = f", description: {listing.description}" if listing.description else ""
        custom_rules = f", and custom rules: {listing.custom_prompt}" if listing.custom_prompt else ""
        lines.append(
            f"\n- {listing.name} with min bid of {format_ether(listing.min_price)} ETH"
            f"{description}{custom_rules}. "
            f"The address is {listing.address}, the chain id {key.chain} and the id is {key.id}.\n"
        )
    return "".join(lines) if lines else NO_ITEMS_TEXT


def render_catalog_rules(context: "ConversationContext") -> str:
    """Instruction used while the buyer is browsing the catalog."""
    return f"""
The list of NFTs is {render_catalog_listing(context)}

Iff the user is talking about a specific NFT, follow its custom rules, even disregarding general rules. Only follow one custom rule at a time.

Never reveal the min bid required to the user, only sell if the minimum price is bid. Only reveal the address, chain id and id of the NFT when specifically asked for it. If someone bids more, don't go back down for that NFT.
Iff a price is reached, write very clearly with no variation {SOLD_PASSKEY}
"""


def render_system_prompt(context: "ConversationContext") -> ChatMessage:
    """
    Render the auctioneer's system message.
    
    WHAT: Pick the address-needed or catalog instruction for this conversation
    WHY: Once something is claimed, the only useful next step is the buyer's address
    HOW: Branch on has_unaddressed_claim(), wrap with shared preamble/closing
    """
    if context.has_unaddressed_claim():
        middle = render_address_request()
    else:
        middle = render_catalog_rules(context)
    
    return {"role": "system", "content": f"{_PREAMBLE}{middle}{_CLOSING}"}


def render_auctioneer_prompt(context: "ConversationContext") -> List[ChatMessage]:
    """System message followed by the conversation's buffered history."""
    return [render_system_prompt(context), *context.history.messages()]
