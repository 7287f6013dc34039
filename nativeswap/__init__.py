"""
Native Swap frame server.

Backend for a Farcaster frame that swaps ETH for the NATIVE token through
0x, shows wallet balances and pushes announcement notifications.
"""

__version__ = "0.1.0"
