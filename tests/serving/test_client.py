import threading
import time

import grpc
import pytest

from feast_client import (
    CallCredentialsError,
    ClientClosedError,
    ConfigurationError,
    FeastClient,
    FieldStatus,
    Row,
    SecurityConfig,
    bearer_token_credentials,
)
from feast_client.core.config import ClientSettings
from feast_client.protos import serving_pb2


@pytest.fixture
def client(serving_server):
    host, port, _ = serving_server
    c = FeastClient.create(host, port)
    try:
        yield c
    finally:
        c.close()


def test_get_feast_serving_info(client):
    info = client.get_feast_serving_info()
    assert info.version == "0.9.5-test"
    assert info.type == serving_pb2.FeastServingType.Value("FEAST_SERVING_TYPE_ONLINE")


def test_one_result_row_per_input_row_in_order(client):
    rows = [Row.create().set("driver_id", i) for i in range(5)]

    result = client.get_online_features(["driver:rating"], rows)

    assert len(result) == 5
    assert [r.get("driver_id") for r in result] == [0, 1, 2, 3, 4]


def test_fields_round_trip_with_statuses(client):
    row = (
        Row.create()
        .set("driver_id", 1001)
        .set("city", "Jakarta")
        .set("scores", [0.5, 0.75])
        .set("active", True)
    )

    (result,) = client.get_online_features(["driver:rating", "trips_today"], [row])

    for name in ("driver_id", "city", "scores", "active"):
        assert result.get_value(name) == row.get_value(name)
        assert result.get_status(name) == FieldStatus.PRESENT
    assert result.get("driver:rating") is None
    assert result.get_status("driver:rating") == FieldStatus.NOT_FOUND
    assert result.get_status("trips_today") == FieldStatus.NOT_FOUND


def test_request_carries_refs_rows_and_timestamp(serving_server, client):
    _, _, servicer = serving_server
    row = Row.create().set_entity_timestamp("2021-01-01T00:00:00+00:00").set("driver_id", 7)

    client.get_online_features(["driver:rating", "trips"], [row], project="rides")

    (request,) = servicer.requests
    assert request.project == "rides"
    assert [(f.feature_table, f.name) for f in request.features] == [("driver", "rating"), ("", "trips")]
    assert request.entity_rows[0].timestamp.seconds == 1609459200
    assert request.entity_rows[0].fields["driver_id"].int64_val == 7


def test_omitted_project_is_empty_string(serving_server, client):
    _, _, servicer = serving_server
    rows = [Row.create().set("driver_id", 1)]

    client.get_online_features(["f"], rows)
    client.get_online_features(["f"], rows, "")

    assert [r.project for r in servicer.requests] == ["", ""]


def test_empty_rows(client):
    assert client.get_online_features(["driver:rating"], []) == []


def test_rpc_error_propagates_unmodified(client):
    with pytest.raises(grpc.RpcError) as ei:
        client.get_online_features(["f"], [Row.create().set("id", 1)], project="broken")
    assert ei.value.code() == grpc.StatusCode.INVALID_ARGUMENT
    assert ei.value.details() == "unknown project"


def test_unreachable_server_raises_rpc_error():
    # nothing listens on port 1
    with FeastClient.create("127.0.0.1", 1) as c:
        with pytest.raises(grpc.RpcError) as ei:
            c.get_feast_serving_info()
    assert ei.value.code() == grpc.StatusCode.UNAVAILABLE


def test_close_twice_does_not_raise(serving_server):
    host, port, _ = serving_server
    c = FeastClient.create(host, port)
    c.close()
    c.close()
    assert c.closed


def test_calls_after_close_fail_with_state_error(serving_server):
    host, port, _ = serving_server
    c = FeastClient.create(host, port)
    c.close()
    with pytest.raises(ClientClosedError):
        c.get_feast_serving_info()
    with pytest.raises(ClientClosedError):
        c.get_online_features(["f"], [])


def test_context_manager_closes(serving_server):
    host, port, _ = serving_server
    with FeastClient.create(host, port) as c:
        assert c.get_feast_serving_info().version
    assert c.closed


def test_close_waits_for_in_flight_call(serving_server):
    host, port, servicer = serving_server
    servicer.delay_s = 0.3
    c = FeastClient.create(host, port)
    results = []

    def call():
        results.append(c.get_online_features(["f"], [Row.create().set("id", 1)]))

    worker = threading.Thread(target=call)
    worker.start()
    assert servicer.received.wait(5)
    c.close()
    worker.join(5)

    assert len(results) == 1
    assert results[0][0].get("id") == 1


def test_close_timeout_cancels_in_flight_call(serving_server):
    host, port, servicer = serving_server
    servicer.delay_s = 2.0
    c = FeastClient.create_secure(host, port, SecurityConfig(), shutdown_timeout_s=0.1)
    errors = []

    def call():
        try:
            c.get_online_features(["f"], [Row.create().set("id", 1)])
        except grpc.RpcError as exc:
            errors.append(exc)

    worker = threading.Thread(target=call)
    worker.start()
    assert servicer.received.wait(5)
    c.close()
    worker.join(5)

    assert len(errors) == 1


def test_from_settings_uses_default_project(serving_server):
    host, port, servicer = serving_server
    settings = ClientSettings(host=host, port=port, project="rides")

    with FeastClient.from_settings(settings) as c:
        c.get_online_features(["f"], [Row.create().set("id", 1)])
        c.get_online_features(["f"], [Row.create().set("id", 1)], project="other")

    assert [r.project for r in servicer.requests] == ["rides", "other"]


def test_close_racing_a_call_start_waits_for_that_call(serving_server):
    host, port, _ = serving_server
    c = FeastClient.create(host, port)
    closer = threading.Thread(target=c.close)
    register = c._in_flight.acquire

    def register_while_closing():
        closer.start()
        # close() is held on the client lock until this call is registered
        time.sleep(0.1)
        register()

    c._in_flight.acquire = register_while_closing
    info = c.get_feast_serving_info()
    closer.join(5)

    assert info.version == "0.9.5-test"
    assert c.closed


def test_bearer_token_reaches_server_over_plaintext(serving_server):
    host, port, servicer = serving_server
    security = SecurityConfig(credentials=bearer_token_credentials("tok"))

    with FeastClient.create_secure(host, port, security) as c:
        c.get_online_features(["f"], [Row.create().set("id", 1)])
        c.get_feast_serving_info()

    assert [m["authorization"] for m in servicer.metadata] == ["Bearer tok", "Bearer tok"]


def test_auth_token_setting_authenticates_calls(serving_server):
    host, port, servicer = serving_server
    settings = ClientSettings(host=host, port=port, auth_token="tok")

    with FeastClient.from_settings(settings) as c:
        c.get_feast_serving_info()

    assert servicer.metadata[-1]["authorization"] == "Bearer tok"


def test_token_provider_is_read_for_every_call(serving_server):
    host, port, servicer = serving_server
    tokens = iter(["first", "second"])
    security = SecurityConfig(credentials=bearer_token_credentials(lambda: next(tokens)))

    with FeastClient.create_secure(host, port, security) as c:
        c.get_feast_serving_info()
        c.get_feast_serving_info()

    assert [m["authorization"] for m in servicer.metadata] == ["Bearer first", "Bearer second"]


def test_failing_token_provider_fails_the_call(serving_server):
    host, port, servicer = serving_server

    def provider():
        raise RuntimeError("token service down")

    security = SecurityConfig(credentials=bearer_token_credentials(provider))
    with FeastClient.create_secure(host, port, security) as c:
        with pytest.raises(CallCredentialsError) as ei:
            c.get_feast_serving_info()

    assert isinstance(ei.value.__cause__, RuntimeError)
    assert servicer.metadata == []


def test_opaque_call_credentials_on_plaintext_fail_construction(serving_server):
    host, port, _ = serving_server
    security = SecurityConfig(credentials=grpc.access_token_call_credentials("tok"))

    with pytest.raises(ConfigurationError):
        FeastClient.create_secure(host, port, security)
