from __future__ import annotations

from typing import Iterable, Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, timestamp_pb2
from google.protobuf.internal import enum_type_wrapper


FieldProto = descriptor_pb2.FieldDescriptorProto

# Private pool; the well-known Timestamp type is registered first since the
# serving messages depend on it.
POOL = descriptor_pool.DescriptorPool()
POOL.AddSerializedFile(timestamp_pb2.DESCRIPTOR.serialized_pb)


def field(
    name: str,
    number: int,
    type_: int,
    *,
    repeated: bool = False,
    type_name: Optional[str] = None,
    oneof_index: Optional[int] = None,
) -> FieldProto:
    f = FieldProto(
        name=name,
        number=number,
        type=type_,
        label=FieldProto.LABEL_REPEATED if repeated else FieldProto.LABEL_OPTIONAL,
    )
    if type_name:
        f.type_name = type_name
    if oneof_index is not None:
        f.oneof_index = oneof_index
    return f


def map_entry(name: str, value_field: FieldProto) -> descriptor_pb2.DescriptorProto:
    """Synthetic ``<Name>Entry`` message protoc emits for ``map<string, V>``."""
    entry = descriptor_pb2.DescriptorProto(name=name)
    entry.field.append(field("key", 1, FieldProto.TYPE_STRING))
    value_field.name = "value"
    value_field.number = 2
    entry.field.append(value_field)
    entry.options.map_entry = True
    return entry


def enum(name: str, values: Iterable[tuple[str, int]]) -> descriptor_pb2.EnumDescriptorProto:
    e = descriptor_pb2.EnumDescriptorProto(name=name)
    for value_name, number in values:
        e.value.add(name=value_name, number=number)
    return e


def register(file_proto: descriptor_pb2.FileDescriptorProto):
    POOL.AddSerializedFile(file_proto.SerializeToString())
    return POOL.FindFileByName(file_proto.name)


def message_class(full_name: str):
    return message_factory.GetMessageClass(POOL.FindMessageTypeByName(full_name))


def enum_wrapper(full_name: str) -> enum_type_wrapper.EnumTypeWrapper:
    return enum_type_wrapper.EnumTypeWrapper(POOL.FindEnumTypeByName(full_name))
