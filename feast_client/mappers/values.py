from __future__ import annotations

from typing import Any, Optional

from feast_client.core.exceptions import UnsupportedValueError
from feast_client.protos import value_pb2


# Ordered: bool is a subclass of int and must match first.
_SCALAR_FIELDS: tuple[tuple[type, str], ...] = (
    (bool, "bool"),
    (int, "int64"),
    (float, "double"),
    (str, "string"),
    (bytes, "bytes"),
    (bytearray, "bytes"),
)


def _kind_of(value: Any) -> Optional[str]:
    for py_type, kind in _SCALAR_FIELDS:
        if isinstance(value, py_type):
            return kind
    return None


def to_value(value: Any) -> value_pb2.Value:
    """Convert a Python value to ``feast.types.Value``.

    ``None`` yields an empty Value (no oneof set). Lists pick their element
    type from the first item.
    """
    if isinstance(value, value_pb2.Value):
        out = value_pb2.Value()
        out.CopyFrom(value)
        return out
    if value is None:
        return value_pb2.Value()

    kind = _kind_of(value)
    if kind is not None:
        if kind == "bytes":
            value = bytes(value)
        return value_pb2.Value(**{f"{kind}_val": value})

    if isinstance(value, (list, tuple)):
        if not value:
            raise UnsupportedValueError("Cannot infer value type of an empty list")
        kind = _kind_of(value[0])
        if kind is None:
            raise UnsupportedValueError(
                f"Unsupported list element type: {type(value[0]).__name__}",
                details={"type": type(value[0]).__name__},
            )
        items = [bytes(v) for v in value] if kind == "bytes" else list(value)
        out = value_pb2.Value()
        getattr(out, f"{kind}_list_val").val.extend(items)
        return out

    raise UnsupportedValueError(
        f"Unsupported value type: {type(value).__name__}",
        details={"type": type(value).__name__},
    )


def from_value(value: value_pb2.Value) -> Any:
    """Decode ``feast.types.Value`` to a Python value; unset decodes to None."""
    which = value.WhichOneof("val")
    if which is None:
        return None
    decoded = getattr(value, which)
    if which.endswith("_list_val"):
        return list(decoded.val)
    return decoded
