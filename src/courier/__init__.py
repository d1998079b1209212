"""Courier: URL model, request builder and response parser for HTTP(S)."""

__version__ = "1.3.0"
