"""Message classes for ``feast/types/Value.proto``."""
from __future__ import annotations

from google.protobuf import descriptor_pb2

from feast_client.protos import _builder
from feast_client.protos._builder import FieldProto, enum, field


_PACKAGE = "feast.types"

# (oneof field, number, scalar type, list message name)
_SCALARS = (
    ("bytes", 1, FieldProto.TYPE_BYTES, "BytesList"),
    ("string", 2, FieldProto.TYPE_STRING, "StringList"),
    ("int32", 3, FieldProto.TYPE_INT32, "Int32List"),
    ("int64", 4, FieldProto.TYPE_INT64, "Int64List"),
    ("double", 5, FieldProto.TYPE_DOUBLE, "DoubleList"),
    ("float", 6, FieldProto.TYPE_FLOAT, "FloatList"),
    ("bool", 7, FieldProto.TYPE_BOOL, "BoolList"),
)
_LIST_OFFSET = 10


def _file_proto() -> descriptor_pb2.FileDescriptorProto:
    fp = descriptor_pb2.FileDescriptorProto(
        name="feast/types/Value.proto",
        package=_PACKAGE,
        syntax="proto3",
    )

    value_type = fp.message_type.add(name="ValueType")
    value_type.enum_type.append(
        enum(
            "Enum",
            [("INVALID", 0)]
            + [(kind.upper(), number) for kind, number, _, _ in _SCALARS]
            + [(f"{kind.upper()}_LIST", number + _LIST_OFFSET) for kind, number, _, _ in _SCALARS],
        )
    )

    value = fp.message_type.add(name="Value")
    value.oneof_decl.add(name="val")
    for kind, number, scalar_type, _ in _SCALARS:
        value.field.append(field(f"{kind}_val", number, scalar_type, oneof_index=0))
    for kind, number, _, list_name in _SCALARS:
        value.field.append(
            field(
                f"{kind}_list_val",
                number + _LIST_OFFSET,
                FieldProto.TYPE_MESSAGE,
                type_name=f".{_PACKAGE}.{list_name}",
                oneof_index=0,
            )
        )

    for _, _, scalar_type, list_name in _SCALARS:
        list_msg = fp.message_type.add(name=list_name)
        list_msg.field.append(field("val", 1, scalar_type, repeated=True))
    return fp


DESCRIPTOR = _builder.register(_file_proto())

ValueType = _builder.message_class("feast.types.ValueType")
Value = _builder.message_class("feast.types.Value")
BytesList = _builder.message_class("feast.types.BytesList")
StringList = _builder.message_class("feast.types.StringList")
Int32List = _builder.message_class("feast.types.Int32List")
Int64List = _builder.message_class("feast.types.Int64List")
DoubleList = _builder.message_class("feast.types.DoubleList")
FloatList = _builder.message_class("feast.types.FloatList")
BoolList = _builder.message_class("feast.types.BoolList")

ValueTypeEnum = _builder.enum_wrapper("feast.types.ValueType.Enum")
