"""
Custom business exceptions for the auction core.

WHAT: Domain-specific exceptions with stable error codes
WHY: Hosts can log or report failures without parsing messages
HOW: Custom exception classes with error codes and details
"""

from typing import Optional, Any


class BusinessException(Exception):
    """Base class for business logic exceptions."""
    
    def __init__(self, message: str, code: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class InvalidAmountException(BusinessException):
    """Raised when an ETH amount string cannot be parsed exactly."""
    
    def __init__(self, amount: str, reason: str = "not a decimal ETH amount"):
        super().__init__(
            message=f"Invalid amount {amount!r}: {reason}",
            code="INVALID_AMOUNT",
            details={"amount": amount, "reason": reason}
        )


class ModelUnavailableException(BusinessException):
    """Raised when the chat model could not produce a reply for a turn."""
    
    def __init__(self, conversation_id: int, reason: str):
        super().__init__(
            message=f"Model unavailable for conversation {conversation_id}: {reason}",
            code="MODEL_UNAVAILABLE",
            details={"conversation_id": conversation_id, "reason": reason}
        )


class StateLoadException(BusinessException):
    """Raised when a persisted state file exists but cannot be restored."""
    
    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Failed to load state from {path}: {reason}",
            code="STATE_LOAD_FAILED",
            details={"path": path, "reason": reason}
        )
