"""Python client for Feast Serving."""
from feast_client.client import AsyncFeastClient, FeastClient
from feast_client.core.exceptions import (
    CallCredentialsError,
    ClientClosedError,
    ConfigurationError,
    FeastClientError,
    UnsupportedValueError,
)
from feast_client.row import FieldStatus, Row
from feast_client.security import SecurityConfig, bearer_token_credentials, plugin_call_credentials

__version__ = "0.1.0"

__all__ = [
    "FeastClient",
    "AsyncFeastClient",
    "Row",
    "FieldStatus",
    "SecurityConfig",
    "bearer_token_credentials",
    "plugin_call_credentials",
    "FeastClientError",
    "ConfigurationError",
    "UnsupportedValueError",
    "ClientClosedError",
    "CallCredentialsError",
]
