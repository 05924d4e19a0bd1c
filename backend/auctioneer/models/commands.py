"""
Auction commands extracted from model replies.

WHAT: Transient command values for the per-item sale state machine
WHY: Keep the effect of a reply separate from how it was parsed
HOW: Frozen dataclasses joined in a union, matched with isinstance
"""

from dataclasses import dataclass

from .listing import ItemKey


@dataclass(frozen=True)
class TentativeClaim:
    """A bid at or above the minimum price, not yet tied to a buyer."""
    item: ItemKey
    price: int


@dataclass(frozen=True)
class LinkBuyerIdentity:
    """Buyer's settlement address captured for the claimed item."""
    item: ItemKey
    buyer: str


@dataclass(frozen=True)
class FinalizedClaim:
    """Claim plus buyer address: ready for external settlement."""
    item: ItemKey
    buyer: str
    price: int


# Commands an extractor may yield for a single reply
Command = TentativeClaim | LinkBuyerIdentity
