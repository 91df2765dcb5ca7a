import http.client as http_client
import os
from unittest import mock
import urllib.parse

import pytest  # type: ignore

from gce_credentials import _helpers
from gce_credentials import environment_vars
from gce_credentials import exceptions
from gce_credentials import metrics
from gce_credentials import transport
from gce_credentials.compute_engine import _metadata

PATH = "instance/service-accounts/default"


def make_request(data, status=http_client.OK, headers=None):
    response = mock.create_autospec(transport.Response, instance=True)
    response.status = status
    response.data = _helpers.to_bytes(data)
    response.headers = headers or {}

    request = mock.create_autospec(transport.Request, instance=True)
    request.return_value = response

    return request


def test_ping_success():
    request = make_request("", headers=_metadata._METADATA_HEADERS)

    assert _metadata.ping(request)

    request.assert_called_once()
    assert request.call_args.kwargs == {
        "method": "GET",
        "url": _metadata._METADATA_IP_ROOT,
        "headers": {
            "metadata-flavor": "Google",
            metrics.API_CLIENT_HEADER: metrics.mds_ping(),
        },
        "timeout": _metadata._COMPUTE_PING_CONNECTION_TIMEOUT_S,
    }


def test_ping_success_retry():
    request = make_request("", headers=_metadata._METADATA_HEADERS)
    request.side_effect = [exceptions.TransportError(), request.return_value]

    assert _metadata.ping(request)
    assert request.call_count == 2


def test_ping_failure_bad_flavor():
    request = make_request("", headers={_metadata._METADATA_FLAVOR_HEADER: "meep"})

    assert not _metadata.ping(request)
    # 응답이 왔다면 헤더 값이 달라도 재시도하지 않는다
    request.assert_called_once()


def test_ping_failure_missing_flavor():
    request = make_request("", headers={})

    assert not _metadata.ping(request)
    request.assert_called_once()


def test_ping_failure_connection_failed():
    request = make_request("")
    request.side_effect = exceptions.TransportError()

    assert not _metadata.ping(request)
    assert request.call_count == _metadata._MAX_COMPUTE_PING_TRIES


def test_ping_error_status_counts_as_failed_attempt():
    request = make_request(
        "", status=http_client.SERVICE_UNAVAILABLE, headers=_metadata._METADATA_HEADERS
    )

    assert not _metadata.ping(request)
    assert request.call_count == _metadata._MAX_COMPUTE_PING_TRIES


def test_ping_worst_case_timeout_budget():
    request = make_request("")
    request.side_effect = exceptions.TransportError("timed out")

    assert not _metadata.ping(request)

    total_timeout = sum(call.kwargs["timeout"] for call in request.call_args_list)
    assert total_timeout <= 1.5


def test_ping_custom_retry_count():
    request = make_request("")
    request.side_effect = exceptions.TransportError()

    assert not _metadata.ping(request, retry_count=5)
    assert request.call_count == 5


def test_get_success_text():
    data = "foobar"
    request = make_request(data, headers={"content-type": "text/plain"})

    result = _metadata.get(request, _metadata.get_project_id_uri())

    request.assert_called_once()
    assert request.call_args.kwargs == {
        "method": "GET",
        "url": _metadata.get_project_id_uri(),
        "headers": _metadata._METADATA_HEADERS,
    }
    assert result == data


def test_get_returns_json_body_verbatim():
    data = '{"foo": "bar"}'
    request = make_request(data, headers={"content-type": "application/json"})

    assert _metadata.get(request, _metadata.get_token_uri()) == data


def test_get_extra_headers():
    request = make_request("x")

    _metadata.get(request, _metadata.get_token_uri(), headers={"key": "value"})

    request.assert_called_once()
    assert request.call_args.kwargs == {
        "method": "GET",
        "url": _metadata.get_token_uri(),
        "headers": {"metadata-flavor": "Google", "key": "value"},
    }


def test_get_failure_status():
    request = make_request("Metadata error", status=http_client.NOT_FOUND)

    with pytest.raises(exceptions.TransportError) as excinfo:
        _metadata.get(request, _metadata.get_client_name_uri())

    assert excinfo.match(r"Metadata error")


def test_get_transport_error_is_not_retried():
    request = make_request("")
    request.side_effect = exceptions.TransportError("connection refused")

    with pytest.raises(exceptions.TransportError) as excinfo:
        _metadata.get(request, _metadata.get_client_name_uri())

    assert excinfo.match(r"connection refused")
    request.assert_called_once()


def test_get_token_uri_default():
    assert _metadata.get_token_uri() == (
        _metadata._METADATA_IP_ROOT
        + "/computeMetadata/v1/instance/service-accounts/default/token"
    )


def test_get_token_uri_scopes():
    url = _metadata.get_token_uri(["foo", "bar"])

    parts = urllib.parse.urlparse(url)
    assert parts.path.endswith(PATH + "/token")
    assert urllib.parse.parse_qs(parts.query) == {"scopes": ["foo,bar"]}


def test_get_id_token_uri():
    url = _metadata.get_id_token_uri("https://example.com")

    parts = urllib.parse.urlparse(url)
    assert parts.path.endswith(PATH + "/identity")
    assert urllib.parse.parse_qs(parts.query) == {"audience": ["https://example.com"]}


def test_get_client_name_and_project_id_uri():
    assert _metadata.get_client_name_uri().endswith(PATH + "/email")
    assert _metadata.get_project_id_uri().endswith("v1/project/project-id")


@mock.patch.dict(os.environ, {environment_vars.GAE_INSTANCE: "aef-default-123"})
def test_on_app_engine_flexible():
    assert _metadata.on_app_engine_flexible()


@mock.patch.dict(os.environ, {environment_vars.GAE_INSTANCE: "default-123"})
def test_on_app_engine_flexible_standard_instance():
    assert not _metadata.on_app_engine_flexible()


@mock.patch.dict(os.environ, {}, clear=True)
def test_on_app_engine_flexible_unset():
    assert not _metadata.on_app_engine_flexible()
