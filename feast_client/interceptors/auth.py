"""Call metadata from an ``AuthMetadataPlugin`` on plaintext channels.

grpc refuses to send ``grpc.CallCredentials`` over an insecure channel, so
the plugin is run here and its metadata appended to the call.
"""
from __future__ import annotations

import asyncio
import collections
import threading
from typing import Optional, Sequence, Tuple

import grpc

from feast_client.core.exceptions import CallCredentialsError
from ._details import aio_with_metadata, method_name, with_metadata


class _AuthMetadataContext(
    collections.namedtuple("_AuthMetadataContext", ("service_url", "method_name")),
    grpc.AuthMetadataContext,
):
    pass


def _plugin_context(authority: str, method: str) -> _AuthMetadataContext:
    service, _, rpc = method.lstrip("/").partition("/")
    return _AuthMetadataContext(f"http://{authority}/{service}", rpc)


def _checked(method: str, metadata: Sequence[Tuple[str, str]], error: Optional[Exception]):
    if error is not None:
        raise CallCredentialsError(
            f"Call credentials failed for {method}",
            details={"method": method, "error": str(error)},
        ) from error
    return tuple(metadata or ())


class AuthMetadataInterceptor(grpc.UnaryUnaryClientInterceptor):
    def __init__(self, plugin: grpc.AuthMetadataPlugin, authority: str) -> None:
        self.plugin = plugin
        self.authority = authority

    def intercept_unary_unary(self, continuation, client_call_details, request):
        method = method_name(client_call_details)
        done = threading.Event()
        result = {}

        def callback(metadata, error):
            result["metadata"], result["error"] = metadata, error
            done.set()

        self.plugin(_plugin_context(self.authority, method), callback)
        # the plugin may answer from another thread
        done.wait()
        metadata = _checked(method, result["metadata"], result["error"])
        return continuation(with_metadata(client_call_details, metadata), request)


class AioAuthMetadataInterceptor(grpc.aio.UnaryUnaryClientInterceptor):
    def __init__(self, plugin: grpc.AuthMetadataPlugin, authority: str) -> None:
        self.plugin = plugin
        self.authority = authority

    async def intercept_unary_unary(self, continuation, client_call_details, request):
        method = method_name(client_call_details)
        loop = asyncio.get_running_loop()
        answered = loop.create_future()

        def callback(metadata, error):
            loop.call_soon_threadsafe(answered.set_result, (metadata, error))

        # token providers may block; keep them off the event loop
        await loop.run_in_executor(None, self.plugin, _plugin_context(self.authority, method), callback)
        metadata = _checked(method, *(await answered))
        return await continuation(aio_with_metadata(client_call_details, metadata), request)
