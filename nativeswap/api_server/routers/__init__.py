"""
API routers for the frame server.
"""

from . import announcements, balances, frames, notifications, swap

__all__ = ["announcements", "balances", "frames", "notifications", "swap"]
