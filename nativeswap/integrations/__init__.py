"""Clients for the external services the frame server talks to."""
