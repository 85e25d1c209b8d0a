"""Protocol buffer bindings for the Feast serving API.

Message classes for ``feast/types/Value.proto`` and
``feast/serving/ServingService.proto`` are built from descriptors at import
time into a private descriptor pool, so no protoc build step is needed and an
installed ``feast`` distribution cannot clash with them. ``serving_pb2_grpc``
mirrors what grpcio-tools would generate for the service.
"""
