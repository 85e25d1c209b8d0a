"""Client-side gRPC interceptors (sync and ``grpc.aio``)."""
from .auth import AioAuthMetadataInterceptor, AuthMetadataInterceptor
from .logging import AioLoggingInterceptor, LoggingInterceptor
from .request_id import REQUEST_ID_META_KEY, AioRequestIdInterceptor, RequestIdInterceptor
from .tracing import AioTracingInterceptor, TracingInterceptor

__all__ = [
    "AuthMetadataInterceptor",
    "AioAuthMetadataInterceptor",
    "LoggingInterceptor",
    "AioLoggingInterceptor",
    "RequestIdInterceptor",
    "AioRequestIdInterceptor",
    "TracingInterceptor",
    "AioTracingInterceptor",
    "REQUEST_ID_META_KEY",
    "default_interceptors",
    "default_aio_interceptors",
]


def default_interceptors(tracer=None, auth_plugin=None, authority="") -> tuple:
    """Request id, logging and tracing; auth metadata last when ``auth_plugin`` is given."""
    interceptors = (RequestIdInterceptor(), LoggingInterceptor(), TracingInterceptor(tracer))
    if auth_plugin is not None:
        interceptors += (AuthMetadataInterceptor(auth_plugin, authority),)
    return interceptors


def default_aio_interceptors(tracer=None, auth_plugin=None, authority="") -> tuple:
    interceptors = (AioRequestIdInterceptor(), AioLoggingInterceptor(), AioTracingInterceptor(tracer))
    if auth_plugin is not None:
        interceptors += (AioAuthMetadataInterceptor(auth_plugin, authority),)
    return interceptors
