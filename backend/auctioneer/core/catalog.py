"""
Authoritative NFT catalog.

WHAT: Global ItemKey -> ItemListing map that seeds every conversation
WHY: One writer keeps listings consistent across open conversations
HOW: Add/remove propagate to the conversation contexts passed in by the owner
"""

from typing import Iterable

from .conversation import ConversationContext
from ..models.listing import AddItemArgs, ItemKey, ItemListing, ListingSummary
from ..models.snapshot import CatalogEntry
from ..utils.logger import get_logger
from ..utils.units import parse_ether

logger = get_logger(__name__)


class Catalog:
    """Listed items keyed by identity, in insertion order."""
    
    def __init__(self, listings: dict[ItemKey, ItemListing] | None = None):
        self._listings: dict[ItemKey, ItemListing] = dict(listings or {})
    
    def add(self, args: AddItemArgs, contexts: Iterable[ConversationContext] = ()) -> ItemKey:
        """
        List an item and offer it to every open conversation.
        
        Conversations that already track the key keep their local state.
        
        Args:
            args: Listing arguments with min_price in ETH
            contexts: Open conversations to propagate the new item to
        
        Returns:
            The item's key
        
        Raises:
            InvalidAmountException: min_price does not parse (nothing is changed)
        """
        min_price = parse_ether(args.min_price)
        key = args.key()
        listing = ItemListing(
            name=args.item_name,
            min_price=min_price,
            address=args.item_address,
            description=args.description,
            custom_prompt=args.sell_prompt,
        )
        
        self._listings[key] = listing
        inserted = sum(1 for context in contexts if context.track_item(key, listing))
        logger.info(f"Listed {listing.name} ({key.chain}:{key.address}#{key.id}), added to {inserted} conversation(s)")
        return key
    
    def remove(self, key: ItemKey, contexts: Iterable[ConversationContext] = ()) -> ItemListing | None:
        """Delist an item everywhere. Removing an unknown key is a no-op."""
        listing = self._listings.pop(key, None)
        for context in contexts:
            context.drop_item(key)
        if listing is not None:
            logger.info(f"Delisted {listing.name} ({key.chain}:{key.address}#{key.id})")
        return listing
    
    def get(self, key: ItemKey) -> ItemListing | None:
        return self._listings.get(key)
    
    def snapshot_listings(self) -> dict[ItemKey, ItemListing]:
        """Copies of every listing, for seeding a new conversation."""
        return {key: listing.model_copy() for key, listing in self._listings.items()}
    
    def listings(self) -> list[ListingSummary]:
        return [ListingSummary.from_listing(key, listing) for key, listing in self._listings.items()]
    
    def to_entries(self) -> list[CatalogEntry]:
        return [CatalogEntry(key=key, listing=listing) for key, listing in self._listings.items()]
    
    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry]) -> "Catalog":
        return cls({entry.key: entry.listing for entry in entries})
    
    def __contains__(self, key: ItemKey) -> bool:
        return key in self._listings
    
    def __len__(self) -> int:
        return len(self._listings)
