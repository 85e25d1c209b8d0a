"""Channel factory for the three supported security modes.

- TLS disabled: plaintext channel.
- TLS enabled, no certificate path: TLS with the system trust store.
- TLS enabled with a certificate path: TLS trusting that PEM file only.

Connection establishment is lazy; nothing here touches the network.
"""
from __future__ import annotations

import ssl
from typing import Optional, Sequence

import grpc

from feast_client.core.exceptions import ConfigurationError
from feast_client.core.logging_config import get_logger
from feast_client.security import SecurityConfig, auth_plugin_of


logger = get_logger(__name__)


def load_root_certificates(certificate_path: str) -> bytes:
    """Read a PEM trust anchor and check that it parses.

    Raises:
        ConfigurationError: file missing, unreadable or not a PEM certificate
    """
    try:
        with open(certificate_path, "rb") as f:
            pem = f.read()
        # grpc only reports a bad trust anchor on the first handshake
        ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT).load_verify_locations(cadata=pem.decode("ascii"))
    except (OSError, UnicodeDecodeError, ssl.SSLError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid Certificate provided at path: {certificate_path}",
            details={"certificate_path": certificate_path, "error": str(exc)},
        ) from exc
    return pem


def channel_credentials(security_config: SecurityConfig) -> Optional[grpc.ChannelCredentials]:
    """Channel credentials for ``security_config``; None means plaintext."""
    if not security_config.tls_enabled:
        return None
    if security_config.certificate_path:
        root_certificates = load_root_certificates(security_config.certificate_path)
        return grpc.ssl_channel_credentials(root_certificates=root_certificates)
    return grpc.ssl_channel_credentials()


def plaintext_auth_plugin(security_config: SecurityConfig) -> Optional[grpc.AuthMetadataPlugin]:
    """Plugin to run from an interceptor when call credentials meet a plaintext channel.

    None when there are no credentials or the channel uses TLS, where grpc
    attaches them itself.

    Raises:
        ConfigurationError: the credentials were not built from a plugin, so
            grpc would reject them on every call
    """
    if security_config.tls_enabled or security_config.credentials is None:
        return None
    plugin = auth_plugin_of(security_config.credentials)
    if plugin is None:
        raise ConfigurationError(
            "Call credentials on a plaintext channel must come from "
            "plugin_call_credentials() or bearer_token_credentials()"
        )
    return plugin


def create_channel(
    host: str,
    port: int,
    security_config: Optional[SecurityConfig] = None,
    interceptors: Sequence[grpc.UnaryUnaryClientInterceptor] = (),
    options: Optional[Sequence[tuple]] = None,
) -> grpc.Channel:
    security_config = security_config or SecurityConfig()
    address = f"{host}:{port}"
    creds = channel_credentials(security_config)
    if creds is None:
        channel = grpc.insecure_channel(address, options=options)
    else:
        channel = grpc.secure_channel(address, creds, options=options)
    logger.debug(
        "grpc_channel_created",
        address=address,
        tls=security_config.tls_enabled,
        custom_certificate=bool(security_config.certificate_path),
    )
    if interceptors:
        channel = grpc.intercept_channel(channel, *interceptors)
    return channel


def create_aio_channel(
    host: str,
    port: int,
    security_config: Optional[SecurityConfig] = None,
    interceptors: Sequence[grpc.aio.ClientInterceptor] = (),
    options: Optional[Sequence[tuple]] = None,
) -> grpc.aio.Channel:
    security_config = security_config or SecurityConfig()
    address = f"{host}:{port}"
    creds = channel_credentials(security_config)
    if creds is None:
        channel = grpc.aio.insecure_channel(address, options=options, interceptors=interceptors or None)
    else:
        channel = grpc.aio.secure_channel(address, creds, options=options, interceptors=interceptors or None)
    logger.debug(
        "grpc_aio_channel_created",
        address=address,
        tls=security_config.tls_enabled,
        custom_certificate=bool(security_config.certificate_path),
    )
    return channel
