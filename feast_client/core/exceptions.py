"""Feast client exceptions.

RPC failures are not wrapped: callers receive the ``grpc.RpcError`` raised by
the transport.
"""
from __future__ import annotations

from typing import Optional


class FeastClientError(Exception):
    """Base client exception."""

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self.message)


class ConfigurationError(FeastClientError):
    """Invalid client or channel configuration."""
    pass


class UnsupportedValueError(FeastClientError, TypeError):
    """Python value with no ``feast.types.Value`` representation."""
    pass


class ClientClosedError(FeastClientError):
    """Call issued on a client that has been closed."""

    def __init__(self) -> None:
        super().__init__("Client is closed")


class CallCredentialsError(FeastClientError):
    """Call credentials could not produce metadata for a call."""
    pass
