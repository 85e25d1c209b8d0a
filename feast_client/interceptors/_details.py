from __future__ import annotations

import collections
from typing import Iterable, List, Optional, Tuple

import grpc


Pair = Tuple[str, str]


class _ClientCallDetails(
    collections.namedtuple(
        "_ClientCallDetails",
        ("method", "timeout", "metadata", "credentials", "wait_for_ready", "compression"),
    ),
    grpc.ClientCallDetails,
):
    pass


def method_name(client_call_details) -> str:
    method = client_call_details.method
    if isinstance(method, bytes):
        return method.decode("utf-8")
    return method


def metadata_pairs(client_call_details) -> List[Pair]:
    return [(k, v) for k, v in (client_call_details.metadata or ())]


def metadata_value(client_call_details, key: str) -> Optional[str]:
    for k, v in metadata_pairs(client_call_details):
        if k == key:
            return v
    return None


def with_metadata(client_call_details, extra: Iterable[Pair]):
    """Copy of sync ``client_call_details`` with ``extra`` metadata appended."""
    metadata = metadata_pairs(client_call_details) + list(extra)
    return _ClientCallDetails(
        client_call_details.method,
        client_call_details.timeout,
        metadata,
        client_call_details.credentials,
        getattr(client_call_details, "wait_for_ready", None),
        getattr(client_call_details, "compression", None),
    )


def aio_with_metadata(client_call_details: grpc.aio.ClientCallDetails, extra: Iterable[Pair]) -> grpc.aio.ClientCallDetails:
    metadata = grpc.aio.Metadata(*(metadata_pairs(client_call_details) + list(extra)))
    return grpc.aio.ClientCallDetails(
        client_call_details.method,
        client_call_details.timeout,
        metadata,
        client_call_details.credentials,
        client_call_details.wait_for_ready,
    )
