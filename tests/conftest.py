"""Pytest fixtures: in-process fake Feast Serving servers.

The fake service echoes every entity row back as one result row. Entity
fields come back PRESENT; every requested feature comes back as
``<table>:<name>`` with status NOT_FOUND and an empty value.
"""
from __future__ import annotations

import os
import threading
import time
from concurrent import futures
from typing import List, Tuple

import grpc
import pytest

from feast_client.protos import serving_pb2, serving_pb2_grpc


FAILING_PROJECT = "broken"


def _feature_name(ref: serving_pb2.FeatureReferenceV2) -> str:
    return f"{ref.feature_table}:{ref.name}" if ref.feature_table else ref.name


def echo_response(request: serving_pb2.GetOnlineFeaturesRequestV2) -> serving_pb2.GetOnlineFeaturesResponse:
    response = serving_pb2.GetOnlineFeaturesResponse()
    for entity_row in request.entity_rows:
        fv = response.field_values.add()
        for name, value in entity_row.fields.items():
            fv.fields[name].CopyFrom(value)
            fv.statuses[name] = serving_pb2.FieldStatus.Value("PRESENT")
        for ref in request.features:
            name = _feature_name(ref)
            fv.fields.get_or_create(name)
            fv.statuses[name] = serving_pb2.FieldStatus.Value("NOT_FOUND")
    return response


def serving_info() -> serving_pb2.GetFeastServingInfoResponse:
    return serving_pb2.GetFeastServingInfoResponse(
        version="0.9.5-test",
        type=serving_pb2.FeastServingType.Value("FEAST_SERVING_TYPE_ONLINE"),
    )


class FakeServingService(serving_pb2_grpc.ServingServiceServicer):
    def __init__(self) -> None:
        self.requests: List[serving_pb2.GetOnlineFeaturesRequestV2] = []
        self.metadata: List[dict] = []
        self.delay_s = 0.0
        self.received = threading.Event()

    def GetFeastServingInfo(self, request, context):  # type: ignore[override]
        self.metadata.append(dict(context.invocation_metadata()))
        return serving_info()

    def GetOnlineFeaturesV2(self, request, context):  # type: ignore[override]
        self.requests.append(request)
        self.metadata.append(dict(context.invocation_metadata()))
        self.received.set()
        if request.project == FAILING_PROJECT:
            context.abort(grpc.StatusCode.INVALID_ARGUMENT, "unknown project")
        if self.delay_s:
            time.sleep(self.delay_s)
        return echo_response(request)


class AioFakeServingService(serving_pb2_grpc.ServingServiceServicer):
    def __init__(self) -> None:
        self.requests: List[serving_pb2.GetOnlineFeaturesRequestV2] = []
        self.metadata: List[dict] = []

    async def GetFeastServingInfo(self, request, context):  # type: ignore[override]
        self.metadata.append(dict(context.invocation_metadata()))
        return serving_info()

    async def GetOnlineFeaturesV2(self, request, context):  # type: ignore[override]
        self.requests.append(request)
        self.metadata.append(dict(context.invocation_metadata()))
        if request.project == FAILING_PROJECT:
            await context.abort(grpc.StatusCode.INVALID_ARGUMENT, "unknown project")
        return echo_response(request)


@pytest.fixture(autouse=True)
def _clean_feast_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("FEAST_SERVING_"):
            monkeypatch.delenv(key)


@pytest.fixture
def serving_server() -> Tuple[str, int, FakeServingService]:
    """Blocking grpc server on an ephemeral port."""
    servicer = FakeServingService()
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=4))
    serving_pb2_grpc.add_ServingServiceServicer_to_server(servicer, server)
    port = server.add_insecure_port("127.0.0.1:0")
    server.start()
    try:
        yield "127.0.0.1", port, servicer
    finally:
        server.stop(grace=None)


@pytest.fixture
async def aio_serving_server():
    servicer = AioFakeServingService()
    server = grpc.aio.server()
    serving_pb2_grpc.add_ServingServiceServicer_to_server(servicer, server)
    port = server.add_insecure_port("127.0.0.1:0")
    await server.start()
    try:
        yield "127.0.0.1", port, servicer
    finally:
        await server.stop(grace=None)
