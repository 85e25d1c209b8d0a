from __future__ import annotations

import uuid

import grpc

from ._details import aio_with_metadata, metadata_value, with_metadata


REQUEST_ID_META_KEY = "x-request-id"


def _missing_request_id(client_call_details) -> list:
    if metadata_value(client_call_details, REQUEST_ID_META_KEY):
        return []
    return [(REQUEST_ID_META_KEY, str(uuid.uuid4()))]


class RequestIdInterceptor(grpc.UnaryUnaryClientInterceptor):
    """Tags each call with ``x-request-id`` unless the caller set one."""

    def intercept_unary_unary(self, continuation, client_call_details, request):
        extra = _missing_request_id(client_call_details)
        if extra:
            client_call_details = with_metadata(client_call_details, extra)
        return continuation(client_call_details, request)


class AioRequestIdInterceptor(grpc.aio.UnaryUnaryClientInterceptor):
    async def intercept_unary_unary(self, continuation, client_call_details, request):
        extra = _missing_request_id(client_call_details)
        if extra:
            client_call_details = aio_with_metadata(client_call_details, extra)
        return await continuation(client_call_details, request)
