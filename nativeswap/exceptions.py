"""
Custom Exception Classes

This module defines custom exceptions for the frame server to provide better
error handling and debugging information.
"""

from typing import Optional


class NativeSwapBaseException(Exception):
    """Base exception for the frame server."""

    pass


class ConfigurationError(NativeSwapBaseException):
    """Raised for configuration problems."""

    pass


class ZeroExAPIError(NativeSwapBaseException):
    """Raised when the 0x Swap API cannot be reached or fails."""

    pass


class ZeroExRateLimitError(ZeroExAPIError):
    """Raised when the 0x Swap API keeps answering 429."""

    pass


class BalanceProviderError(NativeSwapBaseException):
    """Raised when no balance provider could answer a lookup."""

    def __init__(self, provider: str, message: str, original_error: Optional[Exception] = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(f"{provider}: {message}")


class StorageError(NativeSwapBaseException):
    """Raised for Supabase or Redis failures."""

    pass


class NotificationDeliveryError(NativeSwapBaseException):
    """Raised when a notification URL rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotificationRateLimitedError(NativeSwapBaseException):
    """Raised when every token in a send was rate limited by the client."""

    pass


class WebhookVerificationError(NativeSwapBaseException):
    """Raised when a frame webhook envelope cannot be decoded."""

    pass
