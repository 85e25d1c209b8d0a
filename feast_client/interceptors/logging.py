from __future__ import annotations

import time

import grpc

from feast_client.core.logging_config import get_logger
from ._details import method_name, metadata_value
from .request_id import REQUEST_ID_META_KEY


logger = get_logger(__name__)


def _log_outcome(method: str, request_id, start: float, code: grpc.StatusCode, details) -> None:
    elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
    if code == grpc.StatusCode.OK:
        logger.info("grpc_call_done", method=method, elapsed_ms=elapsed_ms, request_id=request_id)
    else:
        logger.error(
            "grpc_call_failed",
            method=method,
            status=str(code),
            message=details,
            elapsed_ms=elapsed_ms,
            request_id=request_id,
        )


class LoggingInterceptor(grpc.UnaryUnaryClientInterceptor):
    def intercept_unary_unary(self, continuation, client_call_details, request):
        method = method_name(client_call_details)
        request_id = metadata_value(client_call_details, REQUEST_ID_META_KEY)
        start = time.perf_counter()
        logger.debug("grpc_call", method=method, request_id=request_id)
        outcome = continuation(client_call_details, request)
        _log_outcome(method, request_id, start, outcome.code(), outcome.details())
        return outcome


class AioLoggingInterceptor(grpc.aio.UnaryUnaryClientInterceptor):
    async def intercept_unary_unary(self, continuation, client_call_details, request):
        method = method_name(client_call_details)
        request_id = metadata_value(client_call_details, REQUEST_ID_META_KEY)
        start = time.perf_counter()
        logger.debug("grpc_call", method=method, request_id=request_id)
        call = await continuation(client_call_details, request)
        _log_outcome(method, request_id, start, await call.code(), await call.details())
        return call
