from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Sequence

from feast_client.mappers.feature_refs import parse_feature_refs
from feast_client.protos import serving_pb2
from feast_client.row import FieldStatus, Row


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _set_timestamp(ts, dt: datetime) -> None:
    # Row timestamps are always UTC-aware
    ts.seconds = calendar.timegm(dt.utctimetuple())
    ts.nanos = dt.microsecond * 1000


def _to_datetime(ts) -> datetime:
    return _EPOCH + timedelta(seconds=ts.seconds, microseconds=ts.nanos // 1000)


def entity_row_from_row(row: Row) -> serving_pb2.EntityRow:
    entity_row = serving_pb2.EntityRow()
    _set_timestamp(entity_row.timestamp, row.get_entity_timestamp())
    for name, value in row.get_fields().items():
        entity_row.fields[name].CopyFrom(value)
    return entity_row


def build_online_features_request(
    feature_refs: Iterable[str],
    rows: Iterable[Row],
    project: str = "",
) -> serving_pb2.GetOnlineFeaturesRequestV2:
    request = serving_pb2.GetOnlineFeaturesRequestV2(project=project)
    request.features.extend(parse_feature_refs(feature_refs))
    request.entity_rows.extend(entity_row_from_row(row) for row in rows)
    return request


def row_from_field_values(field_values: serving_pb2.FieldValues) -> Row:
    row = Row.create()
    for name, value in field_values.fields.items():
        status = field_values.statuses.get(name, FieldStatus.INVALID)
        row.set(name, value, FieldStatus(status))
    return row


def rows_from_response(response: serving_pb2.GetOnlineFeaturesResponse) -> List[Row]:
    return [row_from_field_values(fv) for fv in response.field_values]


def entity_row_to_row(entity_row: serving_pb2.EntityRow) -> Row:
    """Inverse of ``entity_row_from_row``; used by test servers and tooling."""
    row = Row(entity_timestamp=_to_datetime(entity_row.timestamp))
    for name, value in entity_row.fields.items():
        row.set(name, value)
    return row


def rows_to_response(rows: Sequence[Row]) -> serving_pb2.GetOnlineFeaturesResponse:
    response = serving_pb2.GetOnlineFeaturesResponse()
    for row in rows:
        fv = response.field_values.add()
        statuses = row.get_statuses()
        for name, value in row.get_fields().items():
            fv.fields[name].CopyFrom(value)
            fv.statuses[name] = int(statuses[name])
    return response
