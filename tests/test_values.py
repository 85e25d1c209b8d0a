import pytest

from feast_client import FeastClientError, UnsupportedValueError
from feast_client.mappers.values import from_value, to_value
from feast_client.protos import value_pb2


@pytest.mark.parametrize(
    "value, oneof",
    [
        (True, "bool_val"),
        (42, "int64_val"),
        (1.5, "double_val"),
        ("abc", "string_val"),
        (b"\x00\x01", "bytes_val"),
    ],
)
def test_scalars(value, oneof):
    v = to_value(value)
    assert v.WhichOneof("val") == oneof
    assert from_value(v) == value


def test_bool_is_not_encoded_as_int():
    assert to_value(False).WhichOneof("val") == "bool_val"


def test_bytearray_becomes_bytes():
    v = to_value(bytearray(b"xy"))
    assert v.bytes_val == b"xy"


def test_none_is_unset():
    v = to_value(None)
    assert v.WhichOneof("val") is None
    assert from_value(v) is None


@pytest.mark.parametrize(
    "value, oneof",
    [
        ([1, 2, 3], "int64_list_val"),
        (["a", "b"], "string_list_val"),
        ((0.5, 1.5), "double_list_val"),
        ([True, False], "bool_list_val"),
        ([b"a"], "bytes_list_val"),
    ],
)
def test_lists(value, oneof):
    v = to_value(value)
    assert v.WhichOneof("val") == oneof
    assert from_value(v) == list(value)


def test_value_message_is_copied():
    original = value_pb2.Value(int32_val=7)
    v = to_value(original)
    assert v == original
    assert v is not original
    assert from_value(v) == 7


def test_int32_and_float_lists_decode():
    v = value_pb2.Value(int32_list_val=value_pb2.Int32List(val=[1, 2]))
    assert from_value(v) == [1, 2]
    v = value_pb2.Value(float_val=0.5)
    assert from_value(v) == 0.5


def test_empty_list_is_rejected():
    with pytest.raises(UnsupportedValueError):
        to_value([])


@pytest.mark.parametrize("value", [{"a": 1}, object(), [object()]])
def test_unsupported_types(value):
    with pytest.raises(UnsupportedValueError) as ei:
        to_value(value)
    assert isinstance(ei.value, TypeError)
    assert isinstance(ei.value, FeastClientError)
