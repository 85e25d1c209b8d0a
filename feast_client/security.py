"""Channel security options for the Feast client."""
from __future__ import annotations

import weakref
from dataclasses import dataclass, replace
from typing import Callable, Optional, Union

import grpc


@dataclass(frozen=True, slots=True)
class SecurityConfig:
    """TLS and call-credential options consumed by the channel factory.

    Attributes:
        tls_enabled: use a TLS channel instead of plaintext
        certificate_path: PEM file used as trust anchor; system trust store when None
        credentials: call credentials attached to every RPC
    """
    tls_enabled: bool = False
    certificate_path: Optional[str] = None
    credentials: Optional[grpc.CallCredentials] = None

    @staticmethod
    def builder() -> "SecurityConfigBuilder":
        return SecurityConfigBuilder()


class SecurityConfigBuilder:
    def __init__(self) -> None:
        self._config = SecurityConfig()

    def set_tls_enabled(self, enabled: bool) -> "SecurityConfigBuilder":
        self._config = replace(self._config, tls_enabled=enabled)
        return self

    def set_certificate_path(self, path: Optional[str]) -> "SecurityConfigBuilder":
        self._config = replace(self._config, certificate_path=path)
        return self

    def set_credentials(self, credentials: Optional[grpc.CallCredentials]) -> "SecurityConfigBuilder":
        self._config = replace(self._config, credentials=credentials)
        return self

    def build(self) -> SecurityConfig:
        return self._config


TokenSource = Union[str, Callable[[], str]]


class BearerTokenAuthPlugin(grpc.AuthMetadataPlugin):
    """Adds ``authorization: Bearer <token>`` to outgoing calls.

    ``token`` may be a callable so a refreshed token is read on every call.
    """

    def __init__(self, token: TokenSource) -> None:
        self._token = token

    def __call__(self, context: grpc.AuthMetadataContext, callback: grpc.AuthMetadataPluginCallback) -> None:
        try:
            token = self._token() if callable(self._token) else self._token
        except Exception as exc:
            callback((), exc)
            return
        callback((("authorization", f"Bearer {token}"),), None)


# grpc.CallCredentials is opaque; remember the plugin behind the ones built
# here so a plaintext channel can run it from an interceptor instead.
_PLUGINS: "weakref.WeakKeyDictionary[grpc.CallCredentials, grpc.AuthMetadataPlugin]" = weakref.WeakKeyDictionary()


def plugin_call_credentials(plugin: grpc.AuthMetadataPlugin, name: Optional[str] = None) -> grpc.CallCredentials:
    """Call credentials backed by ``plugin``, usable over TLS and plaintext alike."""
    credentials = grpc.metadata_call_credentials(plugin, name=name)
    _PLUGINS[credentials] = plugin
    return credentials


def auth_plugin_of(credentials: grpc.CallCredentials) -> Optional[grpc.AuthMetadataPlugin]:
    """Plugin behind ``credentials`` if they came from plugin_call_credentials()."""
    return _PLUGINS.get(credentials)


def bearer_token_credentials(token: TokenSource) -> grpc.CallCredentials:
    return plugin_call_credentials(BearerTokenAuthPlugin(token), name="feast-bearer-token")
