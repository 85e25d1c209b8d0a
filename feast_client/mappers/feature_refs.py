from __future__ import annotations

from typing import Iterable, List

from feast_client.protos import serving_pb2


def parse_feature_ref(feature_ref: str) -> serving_pb2.FeatureReferenceV2:
    """Parse ``"table:feature"`` into a FeatureReferenceV2.

    The string is split on the first colon; without one the whole string is
    the feature name and the table is empty.
    """
    table, sep, name = feature_ref.partition(":")
    if not sep:
        return serving_pb2.FeatureReferenceV2(feature_table="", name=feature_ref)
    return serving_pb2.FeatureReferenceV2(feature_table=table, name=name)


def parse_feature_refs(feature_refs: Iterable[str]) -> List[serving_pb2.FeatureReferenceV2]:
    return [parse_feature_ref(ref) for ref in feature_refs]
