"""Feast serving clients.

``FeastClient`` issues blocking calls; ``AsyncFeastClient`` exposes the same
operations as coroutines over ``grpc.aio``. Both build requests and reshape
responses through ``feast_client.mappers``.

Example::

    client = FeastClient.create("localhost", 6566)
    rows = client.get_online_features(
        ["driver:driver_id", "driver:driver_name"],
        [Row.create().set("driver_id", 123), Row.create().set("driver_id", 456)],
    )
"""
from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

import grpc
from opentelemetry.trace import Tracer

from feast_client.channel import create_aio_channel, create_channel, plaintext_auth_plugin
from feast_client.core.config import ClientSettings, get_settings
from feast_client.core.exceptions import ClientClosedError
from feast_client.core.logging_config import get_logger
from feast_client.interceptors import default_aio_interceptors, default_interceptors
from feast_client.mappers.rows import build_online_features_request, rows_from_response
from feast_client.protos import serving_pb2, serving_pb2_grpc
from feast_client.row import Row
from feast_client.security import SecurityConfig, bearer_token_credentials


logger = get_logger(__name__)

CHANNEL_SHUTDOWN_TIMEOUT_S = 5.0


def _security_from_settings(settings: ClientSettings) -> SecurityConfig:
    credentials = bearer_token_credentials(settings.auth_token) if settings.auth_token else None
    return SecurityConfig(
        tls_enabled=settings.tls.enabled,
        certificate_path=settings.tls.certificate_path,
        credentials=credentials,
    )


class _InFlight:
    """Counts running calls so close() can wait for them to drain."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    def acquire(self) -> None:
        with self._cond:
            self._count += 1

    def release(self) -> None:
        with self._cond:
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def wait_idle(self, timeout: float) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)


class FeastClient:
    """Blocking client for Feast Serving."""

    def __init__(
        self,
        channel: grpc.Channel,
        credentials: Optional[grpc.CallCredentials] = None,
        *,
        default_project: str = "",
        shutdown_timeout_s: float = CHANNEL_SHUTDOWN_TIMEOUT_S,
    ) -> None:
        """
        Args:
            channel: channel to Feast Serving, already wrapped with interceptors
            credentials: call credentials attached to every call
            default_project: project used when a call does not pass one
            shutdown_timeout_s: how long close() waits for in-flight calls
        """
        self._channel: Optional[grpc.Channel] = channel
        self._stub = serving_pb2_grpc.ServingServiceStub(channel)
        self._credentials = credentials
        self._default_project = default_project
        self._shutdown_timeout_s = shutdown_timeout_s
        self._in_flight = _InFlight()
        self._lock = threading.Lock()

    @classmethod
    def create(cls, host: str, port: int) -> "FeastClient":
        """Plaintext client for ``host:port``."""
        return cls.create_secure(host, port, SecurityConfig())

    @classmethod
    def create_secure(
        cls,
        host: str,
        port: int,
        security_config: SecurityConfig,
        *,
        tracer: Optional[Tracer] = None,
        default_project: str = "",
        shutdown_timeout_s: float = CHANNEL_SHUTDOWN_TIMEOUT_S,
    ) -> "FeastClient":
        """Client for ``host:port`` using the TLS and credential options in ``security_config``.

        Raises:
            ConfigurationError: the configured certificate cannot be loaded
        """
        plugin = plaintext_auth_plugin(security_config)
        channel = create_channel(
            host, port, security_config, interceptors=default_interceptors(tracer, plugin, f"{host}:{port}")
        )
        logger.info(
            "feast_client_created",
            address=f"{host}:{port}",
            tls=security_config.tls_enabled,
            authenticated=security_config.credentials is not None,
        )
        return cls(
            channel,
            None if plugin is not None else security_config.credentials,
            default_project=default_project,
            shutdown_timeout_s=shutdown_timeout_s,
        )

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None, *, tracer: Optional[Tracer] = None) -> "FeastClient":
        settings = settings or get_settings()
        return cls.create_secure(
            settings.host,
            settings.port,
            _security_from_settings(settings),
            tracer=tracer,
            default_project=settings.project,
            shutdown_timeout_s=settings.shutdown_timeout_s,
        )

    @property
    def closed(self) -> bool:
        return self._channel is None

    @contextmanager
    def _call(self) -> Iterator[None]:
        # registered under the close lock so close() always waits for it
        with self._lock:
            if self._channel is None:
                raise ClientClosedError()
            self._in_flight.acquire()
        try:
            yield
        finally:
            self._in_flight.release()

    def get_feast_serving_info(self) -> serving_pb2.GetFeastServingInfoResponse:
        """Version and serving type of the remote Feast Serving."""
        with self._call():
            return self._stub.GetFeastServingInfo(
                serving_pb2.GetFeastServingInfoRequest(), credentials=self._credentials
            )

    def get_online_features(
        self,
        feature_refs: Sequence[str],
        rows: Sequence[Row],
        project: Optional[str] = None,
    ) -> List[Row]:
        """Retrieve online features for ``rows``.

        Args:
            feature_refs: references in the form ``table:feature``; the table
                part is optional
            rows: rows whose fields select the entities to look up
            project: project override; defaults to the client's default
                project ("" lets the server pick)

        Returns:
            one row per input row, in input order, holding the returned
            fields and their statuses

        Raises:
            grpc.RpcError: the call failed; no rows are returned
        """
        request = build_online_features_request(
            feature_refs,
            rows,
            self._default_project if project is None else project,
        )
        with self._call():
            response = self._stub.GetOnlineFeaturesV2(request, credentials=self._credentials)
        return rows_from_response(response)

    def close(self) -> None:
        """Shut the channel down, waiting for in-flight calls to drain.

        Safe to call more than once. Calls still running after the shutdown
        timeout are cancelled by the channel.
        """
        with self._lock:
            channel, self._channel = self._channel, None
        if channel is None:
            return
        start = time.monotonic()
        if not self._in_flight.wait_idle(self._shutdown_timeout_s):
            logger.warning(
                "feast_client_shutdown_timeout",
                timeout_s=self._shutdown_timeout_s,
            )
        channel.close()
        logger.info("feast_client_closed", elapsed_ms=round((time.monotonic() - start) * 1000, 2))

    def __enter__(self) -> "FeastClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncFeastClient:
    """``grpc.aio`` client for Feast Serving; see FeastClient for semantics."""

    def __init__(
        self,
        channel: grpc.aio.Channel,
        credentials: Optional[grpc.CallCredentials] = None,
        *,
        default_project: str = "",
        shutdown_timeout_s: float = CHANNEL_SHUTDOWN_TIMEOUT_S,
    ) -> None:
        self._channel: Optional[grpc.aio.Channel] = channel
        self._stub = serving_pb2_grpc.ServingServiceStub(channel)
        self._credentials = credentials
        self._default_project = default_project
        self._shutdown_timeout_s = shutdown_timeout_s

    @classmethod
    def create(cls, host: str, port: int) -> "AsyncFeastClient":
        return cls.create_secure(host, port, SecurityConfig())

    @classmethod
    def create_secure(
        cls,
        host: str,
        port: int,
        security_config: SecurityConfig,
        *,
        tracer: Optional[Tracer] = None,
        default_project: str = "",
        shutdown_timeout_s: float = CHANNEL_SHUTDOWN_TIMEOUT_S,
    ) -> "AsyncFeastClient":
        plugin = plaintext_auth_plugin(security_config)
        channel = create_aio_channel(
            host, port, security_config, interceptors=default_aio_interceptors(tracer, plugin, f"{host}:{port}")
        )
        logger.info(
            "feast_client_created",
            address=f"{host}:{port}",
            tls=security_config.tls_enabled,
            authenticated=security_config.credentials is not None,
            mode="aio",
        )
        return cls(
            channel,
            None if plugin is not None else security_config.credentials,
            default_project=default_project,
            shutdown_timeout_s=shutdown_timeout_s,
        )

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None, *, tracer: Optional[Tracer] = None) -> "AsyncFeastClient":
        settings = settings or get_settings()
        return cls.create_secure(
            settings.host,
            settings.port,
            _security_from_settings(settings),
            tracer=tracer,
            default_project=settings.project,
            shutdown_timeout_s=settings.shutdown_timeout_s,
        )

    @property
    def closed(self) -> bool:
        return self._channel is None

    def _check_open(self) -> None:
        if self._channel is None:
            raise ClientClosedError()

    async def get_feast_serving_info(self) -> serving_pb2.GetFeastServingInfoResponse:
        self._check_open()
        return await self._stub.GetFeastServingInfo(
            serving_pb2.GetFeastServingInfoRequest(), credentials=self._credentials
        )

    async def get_online_features(
        self,
        feature_refs: Sequence[str],
        rows: Sequence[Row],
        project: Optional[str] = None,
    ) -> List[Row]:
        self._check_open()
        request = build_online_features_request(
            feature_refs,
            rows,
            self._default_project if project is None else project,
        )
        response = await self._stub.GetOnlineFeaturesV2(request, credentials=self._credentials)
        return rows_from_response(response)

    async def close(self) -> None:
        """Close the channel, giving in-flight calls up to the shutdown timeout."""
        channel, self._channel = self._channel, None
        if channel is None:
            return
        await channel.close(grace=self._shutdown_timeout_s)
        logger.info("feast_client_closed", mode="aio")

    async def __aenter__(self) -> "AsyncFeastClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
