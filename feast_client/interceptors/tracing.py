from __future__ import annotations

from typing import Dict, Optional

import grpc
from opentelemetry import trace
from opentelemetry.propagate import inject
from opentelemetry.trace import SpanKind, Status, StatusCode, Tracer

from ._details import aio_with_metadata, method_name, with_metadata


TRACER_NAME = "feast_client"


def _span_attributes(method: str) -> Dict[str, str]:
    # "/feast.serving.ServingService/GetOnlineFeaturesV2"
    service, _, rpc = method.lstrip("/").partition("/")
    return {"rpc.system": "grpc", "rpc.service": service, "rpc.method": rpc}


def _record_status(span: trace.Span, code: grpc.StatusCode, details: Optional[str]) -> None:
    span.set_attribute("rpc.grpc.status_code", code.value[0])
    if code != grpc.StatusCode.OK:
        span.set_status(Status(StatusCode.ERROR, details or code.name))


class TracingInterceptor(grpc.UnaryUnaryClientInterceptor):
    """Runs each call in a client span and propagates its context in metadata."""

    def __init__(self, tracer: Optional[Tracer] = None) -> None:
        self.tracer = tracer or trace.get_tracer(TRACER_NAME)

    def intercept_unary_unary(self, continuation, client_call_details, request):
        method = method_name(client_call_details)
        with self.tracer.start_as_current_span(
            method, kind=SpanKind.CLIENT, attributes=_span_attributes(method)
        ) as span:
            carrier: Dict[str, str] = {}
            inject(carrier)
            outcome = continuation(with_metadata(client_call_details, carrier.items()), request)
            _record_status(span, outcome.code(), outcome.details())
            return outcome


class AioTracingInterceptor(grpc.aio.UnaryUnaryClientInterceptor):
    def __init__(self, tracer: Optional[Tracer] = None) -> None:
        self.tracer = tracer or trace.get_tracer(TRACER_NAME)

    async def intercept_unary_unary(self, continuation, client_call_details, request):
        method = method_name(client_call_details)
        with self.tracer.start_as_current_span(
            method, kind=SpanKind.CLIENT, attributes=_span_attributes(method)
        ) as span:
            carrier: Dict[str, str] = {}
            inject(carrier)
            call = await continuation(aio_with_metadata(client_call_details, carrier.items()), request)
            _record_status(span, await call.code(), await call.details())
            return call
