"""
Per-conversation auction context.

WHAT: One chat's view of the catalog plus its local bid/claim/buyer state
WHY: Each buyer negotiates in isolation; only finalization crosses conversations
HOW: Listing snapshots keyed by ItemKey, a bounded FIFO history, a notice queue
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from ..agents.prompts import render_auctioneer_prompt
from ..llm.types import ChatMessage
from ..models.commands import Command, LinkBuyerIdentity, TentativeClaim
from ..models.listing import ItemKey, ItemListing, ItemState
from ..models.snapshot import ConversationItemEntry, ConversationSnapshot
from ..utils.logger import get_logger

logger = get_logger(__name__)


class HistoryBuffer:
    """Fixed-capacity message history; the oldest message is evicted first."""
    
    def __init__(self, capacity: int, messages: Iterable[ChatMessage] = ()):
        if capacity < 1:
            raise ValueError("History capacity must be >= 1")
        self.capacity = capacity
        self._messages: deque[ChatMessage] = deque(messages, maxlen=capacity)
    
    def push(self, message: ChatMessage) -> None:
        self._messages.append(message)
    
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)
    
    def clear(self) -> None:
        self._messages.clear()
    
    def __len__(self) -> int:
        return len(self._messages)


@dataclass
class TrackedItem:
    """A conversation's copy of a listing together with its sale state."""
    listing: ItemListing
    state: ItemState = field(default_factory=ItemState)


class ConversationContext:
    """Isolated auction state for a single conversation."""
    
    def __init__(self, history_capacity: int = 4):
        self.items: dict[ItemKey, TrackedItem] = {}
        self.buyer_address: str | None = None
        self.history = HistoryBuffer(history_capacity)
        self.pending_notices: list[str] = []
    
    @classmethod
    def seeded(
        cls,
        listings: dict[ItemKey, ItemListing],
        history_capacity: int = 4
    ) -> "ConversationContext":
        """Create a context holding fresh copies of every catalog listing."""
        context = cls(history_capacity)
        for key, listing in listings.items():
            context.track_item(key, listing)
        return context
    
    # Catalog propagation
    
    def track_item(self, key: ItemKey, listing: ItemListing) -> bool:
        """
        Start tracking a listing unless this conversation already knows the key.
        
        Returns:
            True if the item was inserted, False if local state was kept
        """
        if key in self.items:
            return False
        self.items[key] = TrackedItem(listing=listing.model_copy())
        return True
    
    def drop_item(self, key: ItemKey) -> TrackedItem | None:
        """Stop tracking an item; returns what was removed, if anything."""
        return self.items.pop(key, None)
    
    # History
    
    def append_user_message(self, text: str) -> None:
        self.history.push({"role": "user", "content": text})
    
    def append_assistant_message(self, text: str) -> None:
        self.history.push({"role": "assistant", "content": text})
    
    def build_prompt(self) -> list[ChatMessage]:
        """System instruction followed by the buffered history, oldest first."""
        return render_auctioneer_prompt(self)
    
    # Claim state queries
    
    def first_tentative_item(self) -> ItemKey | None:
        for key, tracked in self.items.items():
            if tracked.state.tentative_offer:
                return key
        return None
    
    def has_unaddressed_claim(self) -> bool:
        return self.first_tentative_item() is not None and self.buyer_address is None
    
    def find_item_by_name(self, name: str) -> tuple[ItemKey, TrackedItem] | None:
        """First item whose listing name matches exactly (case-sensitive)."""
        for key, tracked in self.items.items():
            if tracked.listing.name == name:
                return key, tracked
        return None
    
    # Command effects
    
    def apply(self, command: Command) -> None:
        """Apply an extracted command to this conversation's state."""
        if isinstance(command, TentativeClaim):
            tracked = self.items.get(command.item)
            if tracked is None:
                logger.debug(f"Ignoring claim for untracked item {command.item}")
                return
            if command.price < tracked.listing.min_price:
                logger.warning(
                    f"Refusing claim on {tracked.listing.name} below minimum "
                    f"({command.price} < {tracked.listing.min_price} wei)"
                )
                return
            tracked.state.tentative_offer = True
            tracked.state.highest_bid = max(tracked.state.highest_bid, command.price)
        elif isinstance(command, LinkBuyerIdentity):
            self.buyer_address = command.buyer
        else:
            raise TypeError(f"Unknown command type: {type(command).__name__}")
    
    # Notices
    
    def queue_notice(self, item_name: str) -> None:
        self.pending_notices.append(item_name)
    
    def take_notices(self) -> list[str]:
        notices, self.pending_notices = self.pending_notices, []
        return notices
    
    # Persistence
    
    def to_snapshot(self) -> ConversationSnapshot:
        return ConversationSnapshot(
            items=[
                ConversationItemEntry(
                    key=key,
                    listing=tracked.listing,
                    state=tracked.state.model_copy()
                )
                for key, tracked in self.items.items()
            ],
            buyer_address=self.buyer_address,
            history_capacity=self.history.capacity,
            history=[dict(message) for message in self.history.messages()],
            pending_notices=list(self.pending_notices),
        )
    
    @classmethod
    def from_snapshot(cls, snapshot: ConversationSnapshot) -> "ConversationContext":
        context = cls(snapshot.history_capacity)
        for entry in snapshot.items:
            context.items[entry.key] = TrackedItem(
                listing=entry.listing,
                state=entry.state.model_copy()
            )
        context.buyer_address = snapshot.buyer_address
        context.history = HistoryBuffer(
            snapshot.history_capacity,
            [{"role": m["role"], "content": m["content"]} for m in snapshot.history]
        )
        context.pending_notices = list(snapshot.pending_notices)
        return context
