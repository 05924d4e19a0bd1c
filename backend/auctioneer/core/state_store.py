"""
Auction state persistence.

WHAT: Save and restore the ContextManager as a JSON snapshot file
WHY: Listings, claims and chat history must survive process restarts
HOW: Pydantic JSON dump written via a temp file and atomic replace
"""

import os
from pathlib import Path

from pydantic import ValidationError

from ..llm.provider import LLMProvider
from ..models.snapshot import ContextManagerSnapshot
from ..utils.exceptions import StateLoadException
from ..utils.logger import get_logger
from .config import settings
from .context_manager import ContextManager

logger = get_logger(__name__)


def save_state(manager: ContextManager, path: str | Path | None = None) -> Path:
    """
    Persist the manager's snapshot.
    
    Args:
        manager: Manager to save
        path: Target file (default settings.STATE_FILE)
    
    Returns:
        Path written
    """
    state_file = Path(path or settings.STATE_FILE)
    state_file.parent.mkdir(parents=True, exist_ok=True)
    
    snapshot = manager.to_snapshot()
    tmp_file = state_file.with_suffix(state_file.suffix + ".tmp")
    tmp_file.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
    os.replace(tmp_file, state_file)
    
    logger.info(
        f"Saved state to {state_file} "
        f"({len(snapshot.catalog)} listing(s), {len(snapshot.conversations)} conversation(s))"
    )
    return state_file


def load_state(
    provider: LLMProvider,
    path: str | Path | None = None,
    **manager_kwargs
) -> ContextManager | None:
    """
    Restore a manager from disk.
    
    Args:
        provider: Chat-completion collaborator for the restored manager
        path: Source file (default settings.STATE_FILE)
        **manager_kwargs: Passed through to ContextManager
    
    Returns:
        Restored manager, or None if no state file exists
    
    Raises:
        StateLoadException: File exists but is unreadable or invalid
    """
    state_file = Path(path or settings.STATE_FILE)
    if not state_file.exists():
        logger.info(f"No state file at {state_file}, starting fresh")
        return None
    
    try:
        snapshot = ContextManagerSnapshot.model_validate_json(state_file.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.error(f"Failed to load state from {state_file}: {e}")
        raise StateLoadException(str(state_file), str(e)) from e
    
    manager = ContextManager.from_snapshot(snapshot, provider, **manager_kwargs)
    logger.info(
        f"Loaded state from {state_file} "
        f"({len(snapshot.catalog)} listing(s), {len(snapshot.conversations)} conversation(s))"
    )
    return manager
