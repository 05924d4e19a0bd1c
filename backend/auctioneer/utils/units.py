"""
ETH amount parsing and formatting.

WHAT: Convert between human-readable ETH strings and integer wei
WHY: Bids and minimum prices must compare exactly, floats cannot
HOW: ASCII-only shape check, then web3's exact Decimal unit conversion
"""

import re
from decimal import Decimal, InvalidOperation

from web3 import Web3

from .exceptions import InvalidAmountException

ETHER_DECIMALS = 18
WEI_PER_ETHER = 10 ** ETHER_DECIMALS

# 2**256 - 1 wei is just under 10**60 ETH, so no valid amount has more whole digits
MAX_WHOLE_DIGITS = 60

_AMOUNT_PATTERN = re.compile(r'^([0-9]*)(?:\.([0-9]*))?$')


def parse_ether(text: str) -> int:
    """
    Parse a decimal ETH amount into wei.

    Accepts "1", "0.5", ".5" and "2." style input. Signs, exponents,
    thousands separators, non-ASCII digits, more than 18 fractional digits
    and amounts beyond the uint256 wei range are rejected.

    Args:
        text: Amount in ETH

    Returns:
        Amount in wei

    Raises:
        InvalidAmountException: If the string is not an exact ETH amount
    """
    if not isinstance(text, str):
        raise InvalidAmountException(repr(text), "expected a string")

    candidate = text.strip()
    match = _AMOUNT_PATTERN.match(candidate)
    if not match:
        raise InvalidAmountException(text[:80])

    whole, fraction = match.group(1), match.group(2) or ""
    if not whole and not fraction:
        raise InvalidAmountException(text, "no digits")
    if len(fraction) > ETHER_DECIMALS:
        raise InvalidAmountException(text[:80], f"more than {ETHER_DECIMALS} decimal places")
    if len(whole.lstrip("0")) > MAX_WHOLE_DIGITS:
        raise InvalidAmountException(text[:80], "too large")

    try:
        return Web3.to_wei(Decimal(candidate), "ether")
    except (ValueError, InvalidOperation) as e:
        raise InvalidAmountException(text[:80], str(e))


def format_ether(wei: int) -> str:
    """Render wei as the shortest exact ETH string ("0.5", "1", "0")."""
    text = format(Web3.from_wei(wei, "ether"), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
