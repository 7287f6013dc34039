"""
Address Truncation Utility

Formats Ethereum addresses for display by showing only the start and end
portions, e.g. "0xAb12...5678" (first 6 chars + last 4 chars).
"""

from typing import Optional


def truncate_address(address: Optional[str]) -> str:
    """Return the display form of an address, or "" when there is none."""
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"
