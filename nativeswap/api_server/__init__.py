"""
API Server package for the Native Swap frame.

This package provides a modular FastAPI-based REST API serving the frame
page, swap pricing, wallet balances and the notification pipeline.
"""

from .server import create_api_server

__all__ = ["create_api_server"]
