"""
Auction context manager.

WHAT: Owns the catalog and every conversation context; the core's public API
WHY: Single writer for cross-conversation consistency when an item sells
HOW: Lazy per-conversation contexts, decoupled chat()/act() steps, notice queues
"""

from ..agents.command_extractor import CommandExtractor, MarkerCommandExtractor
from ..llm.provider import LLMProvider
from ..llm.types import PROVIDER_ERRORS
from ..models.commands import FinalizedClaim
from ..models.listing import AddItemArgs, ItemKey, ListingSummary
from ..models.snapshot import ContextManagerSnapshot
from ..utils.exceptions import ModelUnavailableException
from ..utils.logger import get_logger
from .catalog import Catalog
from .config import settings
from .conversation import ConversationContext

logger = get_logger(__name__)

ADDRESS_NUDGE = "Please send me your public Ethereum address so I can reserve the NFT for you."


def format_sold_notice(item_names: list[str]) -> str:
    """Sentence telling a buyer that items were sold in another conversation."""
    if len(item_names) == 1:
        return f"Heads up: {item_names[0]} was just sold to another buyer and is no longer available."
    return f"Heads up: {', '.join(item_names)} were just sold to other buyers and are no longer available."


class ContextManager:
    """
    Orchestrates the catalog and conversation contexts.
    
    chat() talks to the model and records history; act() applies the business
    effects of a reply. Callers must process one event at a time.
    """
    
    def __init__(
        self,
        provider: LLMProvider,
        *,
        catalog: Catalog | None = None,
        extractor: CommandExtractor | None = None,
        history_capacity: int | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None
    ):
        """
        Initialize the manager.
        
        Args:
            provider: Chat-completion collaborator
            catalog: Existing catalog (defaults to empty)
            extractor: Reply parser (defaults to MarkerCommandExtractor)
            history_capacity: Messages kept per conversation (default from settings)
            temperature: Sampling temperature passed to the provider
            max_tokens: Token limit passed to the provider
            model: Model override passed to the provider
        """
        self.provider = provider
        self.catalog = catalog or Catalog()
        self.extractor = extractor or MarkerCommandExtractor()
        self.history_capacity = history_capacity or settings.CHAT_HISTORY_CAPACITY
        self.temperature = settings.LLM_DEFAULT_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_DEFAULT_MAX_TOKENS
        self.model = model
        self.contexts: dict[int, ConversationContext] = {}
    
    # Conversation registry
    
    def get_context(self, conversation_id: int) -> ConversationContext:
        """Return the conversation's context, creating it from the catalog on first contact."""
        context = self.contexts.get(conversation_id)
        if context is None:
            context = ConversationContext.seeded(
                self.catalog.snapshot_listings(),
                history_capacity=self.history_capacity
            )
            self.contexts[conversation_id] = context
            logger.info(f"Created context for conversation {conversation_id} ({len(context.items)} item(s))")
        return context
    
    def clear(self, conversation_id: int) -> None:
        """Discard a conversation's history and state entirely."""
        if self.contexts.pop(conversation_id, None) is not None:
            logger.info(f"Cleared context for conversation {conversation_id}")
    
    # Chat and act
    
    async def chat(self, conversation_id: int, text: str) -> str:
        """
        Send a user message to the model within its conversation.
        
        Args:
            conversation_id: Chat identifier
            text: User's message
        
        Returns:
            The model's reply, verbatim
        
        Raises:
            ModelUnavailableException: The provider failed or timed out (not retried)
        """
        context = self.get_context(conversation_id)
        context.append_user_message(text)
        
        try:
            result = await self.provider.generate(
                context.build_prompt(),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                model=self.model
            )
        except PROVIDER_ERRORS as e:
            logger.error(f"Model call failed for conversation {conversation_id}: {e}")
            raise ModelUnavailableException(conversation_id, str(e)) from e
        
        context.append_assistant_message(result.text)
        return result.text
    
    def act(self, conversation_id: int, reply_text: str) -> FinalizedClaim | None:
        """
        Apply the effects of a model reply and check for a finalized claim.
        
        Returns:
            FinalizedClaim when the conversation has a tentative claim and a
            buyer address after the reply is applied, otherwise None
        """
        context = self.get_context(conversation_id)
        command = self.extractor.extract(context, reply_text)
        if command is not None:
            context.apply(command)
        
        key = context.first_tentative_item()
        if key is None or context.buyer_address is None:
            return None
        
        claim = FinalizedClaim(
            item=key,
            buyer=context.buyer_address,
            price=context.items[key].state.highest_bid
        )
        logger.info(
            f"Finalized claim in conversation {conversation_id}: "
            f"{context.items[key].listing.name} -> {claim.buyer} for {claim.price} wei"
        )
        return claim
    
    def additional_text(self, conversation_id: int) -> str | None:
        """
        Extra text to send after the reply, if any.
        
        An unaddressed claim nudge takes priority over sold-elsewhere notices;
        notices are consumed when returned.
        """
        context = self.get_context(conversation_id)
        if context.has_unaddressed_claim():
            return ADDRESS_NUDGE
        notices = context.take_notices()
        if notices:
            return format_sold_notice(notices)
        return None
    
    def finalize_and_remove(self, item_key: ItemKey, originating_conversation_id: int) -> None:
        """Remove a sold item everywhere and notify the other conversations that held it."""
        for conversation_id, context in self.contexts.items():
            if conversation_id == originating_conversation_id:
                continue
            tracked = context.items.get(item_key)
            if tracked is not None:
                context.queue_notice(tracked.listing.name)
                logger.debug(f"Queued sold notice for {tracked.listing.name} in conversation {conversation_id}")
        self.catalog.remove(item_key, self.contexts.values())
    
    # Catalog pass-throughs
    
    def add_nft(self, args: AddItemArgs) -> ItemKey:
        return self.catalog.add(args, self.contexts.values())
    
    def remove_nft(self, key: ItemKey) -> None:
        self.catalog.remove(key, self.contexts.values())
    
    def list_items(self) -> list[ListingSummary]:
        return self.catalog.listings()
    
    # Persistence
    
    def to_snapshot(self) -> ContextManagerSnapshot:
        return ContextManagerSnapshot(
            catalog=self.catalog.to_entries(),
            conversations={
                conversation_id: context.to_snapshot()
                for conversation_id, context in self.contexts.items()
            }
        )
    
    @classmethod
    def from_snapshot(
        cls,
        snapshot: ContextManagerSnapshot,
        provider: LLMProvider,
        **kwargs
    ) -> "ContextManager":
        """Rebuild a manager from a snapshot; kwargs are passed to __init__."""
        manager = cls(provider, catalog=Catalog.from_entries(snapshot.catalog), **kwargs)
        manager.contexts = {
            conversation_id: ConversationContext.from_snapshot(conversation)
            for conversation_id, conversation in snapshot.conversations.items()
        }
        return manager
