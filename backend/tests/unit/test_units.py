"""
Tests for ETH amount parsing and formatting.

WHAT: Test exact wei conversion
WHY: Bids are compared against minimum prices; rounding would break the rules
HOW: Direct assertions on parse_ether/format_ether
"""

import pytest

from auctioneer.utils.exceptions import InvalidAmountException
from auctioneer.utils.units import WEI_PER_ETHER, format_ether, parse_ether


@pytest.mark.unit
class TestParseEther:
    """Test parse_ether."""
    
    @pytest.mark.parametrize("text,expected", [
        ("1", WEI_PER_ETHER),
        ("0.5", 500_000_000_000_000_000),
        (".5", 500_000_000_000_000_000),
        ("2.", 2 * WEI_PER_ETHER),
        ("0.000000000000000001", 1),
        (" 0.6 ", 600_000_000_000_000_000),
        ("0", 0),
    ])
    def test_valid_amounts(self, text, expected):
        assert parse_ether(text) == expected
    
    def test_exact_where_float_is_not(self):
        """0.1 + 0.2 style amounts stay exact."""
        assert parse_ether("0.1") + parse_ether("0.2") == parse_ether("0.3")
    
    @pytest.mark.parametrize("text", [
        "", ".", "abc", "-1", "+1", "1e18", "1,000", "0.5 ETH", "1.2.3",
        "0.0000000000000000001",  # 19 decimals
        "١.٥",  # Arabic-Indic digits
        "１",  # fullwidth digit
        "9" * 5000,
        "1" + "0" * 60,  # beyond uint256 wei
    ])
    def test_invalid_amounts(self, text):
        with pytest.raises(InvalidAmountException) as exc_info:
            parse_ether(text)
        assert exc_info.value.code == "INVALID_AMOUNT"
    
    def test_uint256_ceiling_accepted(self):
        assert parse_ether("1" + "0" * 59) == 10 ** 77
    
    def test_non_string_rejected(self):
        with pytest.raises(InvalidAmountException):
            parse_ether(0.5)


@pytest.mark.unit
class TestFormatEther:
    """Test format_ether."""
    
    @pytest.mark.parametrize("wei,expected", [
        (0, "0"),
        (WEI_PER_ETHER, "1"),
        (10 * WEI_PER_ETHER, "10"),
        (500_000_000_000_000_000, "0.5"),
        (1, "0.000000000000000001"),
        (1_250_000_000_000_000_000, "1.25"),
    ])
    def test_format(self, wei, expected):
        assert format_ether(wei) == expected
