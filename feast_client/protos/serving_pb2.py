"""Message classes for ``feast/serving/ServingService.proto``."""
from __future__ import annotations

from google.protobuf import descriptor_pb2

from feast_client.protos import _builder, value_pb2
from feast_client.protos._builder import FieldProto, enum, field, map_entry


_PACKAGE = "feast.serving"
_VALUE = ".feast.types.Value"


def _file_proto() -> descriptor_pb2.FileDescriptorProto:
    fp = descriptor_pb2.FileDescriptorProto(
        name="feast/serving/ServingService.proto",
        package=_PACKAGE,
        syntax="proto3",
    )
    fp.dependency.extend(["google/protobuf/timestamp.proto", value_pb2.DESCRIPTOR.name])

    fp.enum_type.append(
        enum(
            "FeastServingType",
            [
                ("FEAST_SERVING_TYPE_INVALID", 0),
                ("FEAST_SERVING_TYPE_ONLINE", 1),
                ("FEAST_SERVING_TYPE_BATCH", 2),
            ],
        )
    )

    fp.message_type.add(name="GetFeastServingInfoRequest")

    info = fp.message_type.add(name="GetFeastServingInfoResponse")
    info.field.extend([
        field("version", 1, FieldProto.TYPE_STRING),
        field("type", 2, FieldProto.TYPE_ENUM, type_name=f".{_PACKAGE}.FeastServingType"),
        field("job_staging_location", 10, FieldProto.TYPE_STRING),
    ])

    ref = fp.message_type.add(name="FeatureReferenceV2")
    ref.field.extend([
        field("feature_table", 1, FieldProto.TYPE_STRING),
        field("name", 2, FieldProto.TYPE_STRING),
    ])

    request = fp.message_type.add(name="GetOnlineFeaturesRequestV2")
    entity_row = request.nested_type.add(name="EntityRow")
    entity_row.nested_type.append(
        map_entry("FieldsEntry", field("value", 2, FieldProto.TYPE_MESSAGE, type_name=_VALUE))
    )
    entity_row.field.extend([
        field("timestamp", 1, FieldProto.TYPE_MESSAGE, type_name=".google.protobuf.Timestamp"),
        field(
            "fields", 2, FieldProto.TYPE_MESSAGE, repeated=True,
            type_name=f".{_PACKAGE}.GetOnlineFeaturesRequestV2.EntityRow.FieldsEntry",
        ),
    ])
    request.field.extend([
        field(
            "entity_rows", 2, FieldProto.TYPE_MESSAGE, repeated=True,
            type_name=f".{_PACKAGE}.GetOnlineFeaturesRequestV2.EntityRow",
        ),
        field(
            "features", 4, FieldProto.TYPE_MESSAGE, repeated=True,
            type_name=f".{_PACKAGE}.FeatureReferenceV2",
        ),
        field("project", 5, FieldProto.TYPE_STRING),
    ])

    response = fp.message_type.add(name="GetOnlineFeaturesResponse")
    response.enum_type.append(
        enum(
            "FieldStatus",
            [
                ("INVALID", 0),
                ("PRESENT", 1),
                ("NULL_VALUE", 2),
                ("NOT_FOUND", 3),
                ("OUTSIDE_MAX_AGE", 4),
            ],
        )
    )
    field_values = response.nested_type.add(name="FieldValues")
    field_values.nested_type.extend([
        map_entry("FieldsEntry", field("value", 2, FieldProto.TYPE_MESSAGE, type_name=_VALUE)),
        map_entry(
            "StatusesEntry",
            field(
                "value", 2, FieldProto.TYPE_ENUM,
                type_name=f".{_PACKAGE}.GetOnlineFeaturesResponse.FieldStatus",
            ),
        ),
    ])
    field_values.field.extend([
        field(
            "fields", 1, FieldProto.TYPE_MESSAGE, repeated=True,
            type_name=f".{_PACKAGE}.GetOnlineFeaturesResponse.FieldValues.FieldsEntry",
        ),
        field(
            "statuses", 2, FieldProto.TYPE_MESSAGE, repeated=True,
            type_name=f".{_PACKAGE}.GetOnlineFeaturesResponse.FieldValues.StatusesEntry",
        ),
    ])
    response.field.append(
        field(
            "field_values", 1, FieldProto.TYPE_MESSAGE, repeated=True,
            type_name=f".{_PACKAGE}.GetOnlineFeaturesResponse.FieldValues",
        )
    )

    service = fp.service.add(name="ServingService")
    service.method.add(
        name="GetFeastServingInfo",
        input_type=f".{_PACKAGE}.GetFeastServingInfoRequest",
        output_type=f".{_PACKAGE}.GetFeastServingInfoResponse",
    )
    service.method.add(
        name="GetOnlineFeaturesV2",
        input_type=f".{_PACKAGE}.GetOnlineFeaturesRequestV2",
        output_type=f".{_PACKAGE}.GetOnlineFeaturesResponse",
    )
    return fp


DESCRIPTOR = _builder.register(_file_proto())

FeastServingType = _builder.enum_wrapper("feast.serving.FeastServingType")
FieldStatus = _builder.enum_wrapper("feast.serving.GetOnlineFeaturesResponse.FieldStatus")

GetFeastServingInfoRequest = _builder.message_class("feast.serving.GetFeastServingInfoRequest")
GetFeastServingInfoResponse = _builder.message_class("feast.serving.GetFeastServingInfoResponse")
FeatureReferenceV2 = _builder.message_class("feast.serving.FeatureReferenceV2")
GetOnlineFeaturesRequestV2 = _builder.message_class("feast.serving.GetOnlineFeaturesRequestV2")
EntityRow = _builder.message_class("feast.serving.GetOnlineFeaturesRequestV2.EntityRow")
GetOnlineFeaturesResponse = _builder.message_class("feast.serving.GetOnlineFeaturesResponse")
FieldValues = _builder.message_class("feast.serving.GetOnlineFeaturesResponse.FieldValues")
