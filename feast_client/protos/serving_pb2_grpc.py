"""Client and server classes for the ``feast.serving.ServingService`` gRPC service."""
from __future__ import annotations

import grpc

from feast_client.protos import serving_pb2


SERVICE_NAME = "feast.serving.ServingService"


class ServingServiceStub:
    """Client stub for ServingService."""

    def __init__(self, channel) -> None:
        """Initialize the stub.

        Args:
            channel: A ``grpc.Channel`` or ``grpc.aio.Channel``.
        """
        self.GetFeastServingInfo = channel.unary_unary(
            f"/{SERVICE_NAME}/GetFeastServingInfo",
            request_serializer=serving_pb2.GetFeastServingInfoRequest.SerializeToString,
            response_deserializer=serving_pb2.GetFeastServingInfoResponse.FromString,
        )
        self.GetOnlineFeaturesV2 = channel.unary_unary(
            f"/{SERVICE_NAME}/GetOnlineFeaturesV2",
            request_serializer=serving_pb2.GetOnlineFeaturesRequestV2.SerializeToString,
            response_deserializer=serving_pb2.GetOnlineFeaturesResponse.FromString,
        )


class ServingServiceServicer:
    """Base class for ServingService implementations."""

    def GetFeastServingInfo(self, request, context):
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")

    def GetOnlineFeaturesV2(self, request, context):
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")


def add_ServingServiceServicer_to_server(servicer, server) -> None:
    rpc_method_handlers = {
        "GetFeastServingInfo": grpc.unary_unary_rpc_method_handler(
            servicer.GetFeastServingInfo,
            request_deserializer=serving_pb2.GetFeastServingInfoRequest.FromString,
            response_serializer=serving_pb2.GetFeastServingInfoResponse.SerializeToString,
        ),
        "GetOnlineFeaturesV2": grpc.unary_unary_rpc_method_handler(
            servicer.GetOnlineFeaturesV2,
            request_deserializer=serving_pb2.GetOnlineFeaturesRequestV2.FromString,
            response_serializer=serving_pb2.GetOnlineFeaturesResponse.SerializeToString,
        ),
    }
    generic_handler = grpc.method_handlers_generic_handler(SERVICE_NAME, rpc_method_handlers)
    server.add_generic_rpc_handlers((generic_handler,))
