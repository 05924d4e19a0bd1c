"""
Catalog domain models.

WHAT: Item identity, catalog listings, and per-conversation item state
WHY: One identity tuple shared by the catalog and every conversation
HOW: Pydantic v2 models; keys and listings are frozen so copies are safe to share
"""

from pydantic import BaseModel, ConfigDict, Field

from ..utils.units import format_ether


class ItemKey(BaseModel):
    """Identity of a listed NFT: token id, chain id and contract address."""
    
    model_config = ConfigDict(frozen=True)
    
    id: int = Field(ge=0)
    chain: int = Field(ge=0)
    address: str


class ItemListing(BaseModel):
    """Catalog record for an NFT. Prices are integer wei."""
    
    model_config = ConfigDict(frozen=True)
    
    name: str = Field(min_length=1)
    min_price: int = Field(ge=0)
    address: str
    description: str | None = None
    custom_prompt: str | None = None


class ItemState(BaseModel):
    """Conversation-local sale state for one item."""
    
    highest_bid: int = Field(default=0, ge=0)
    tentative_offer: bool = False


class AddItemArgs(BaseModel):
    """Arguments for listing a new NFT; min_price is a decimal ETH string."""
    
    item_name: str = Field(min_length=1)
    item_address: str
    item_id: int = Field(ge=0)
    chain_id: int = Field(ge=0)
    description: str | None = None
    sell_prompt: str | None = None
    min_price: str
    
    def key(self) -> ItemKey:
        return ItemKey(id=self.item_id, chain=self.chain_id, address=self.item_address)


class ListingSummary(BaseModel):
    """Read-only view of a catalog entry for display."""
    
    id: int
    chain: int
    address: str
    name: str
    min_price: int
    min_price_eth: str
    description: str | None = None
    custom_prompt: str | None = None
    
    @classmethod
    def from_listing(cls, key: ItemKey, listing: ItemListing) -> "ListingSummary":
        return cls(
            id=key.id,
            chain=key.chain,
            address=key.address,
            name=listing.name,
            min_price=listing.min_price,
            min_price_eth=format_ether(listing.min_price),
            description=listing.description,
            custom_prompt=listing.custom_prompt,
        )
