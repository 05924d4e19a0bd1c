"""
Persisted state shape.

WHAT: Serializable snapshot of the catalog and every conversation
WHY: Hosts persist and restore the auction state between restarts
HOW: Pydantic models; structured-key maps become ordered entry lists
"""

from pydantic import BaseModel, Field

from .listing import ItemKey, ItemListing, ItemState


class CatalogEntry(BaseModel):
    key: ItemKey
    listing: ItemListing


class ConversationItemEntry(BaseModel):
    key: ItemKey
    listing: ItemListing
    state: ItemState


class ConversationSnapshot(BaseModel):
    """One conversation: local items, buyer address, history, notices."""
    
    items: list[ConversationItemEntry] = Field(default_factory=list)
    buyer_address: str | None = None
    history_capacity: int = Field(ge=1)
    history: list[dict[str, str]] = Field(default_factory=list)
    pending_notices: list[str] = Field(default_factory=list)


class ContextManagerSnapshot(BaseModel):
    """Complete auction state: catalog plus conversation id -> conversation."""
    
    catalog: list[CatalogEntry] = Field(default_factory=list)
    conversations: dict[int, ConversationSnapshot] = Field(default_factory=dict)
