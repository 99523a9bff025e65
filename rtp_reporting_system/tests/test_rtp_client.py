from unittest import mock

import pytest
import requests

from rtp_reporting_system.backend.rtp_client import RTPApiClient, RTPApiError


def make_response(status=200, body=None, reason="OK", invalid_json=False):
    response = mock.Mock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    if invalid_json:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


def make_client(*outcomes, max_retries=3, retry_delay=1.0):
    session = mock.Mock()
    session.headers = {}
    session.request.side_effect = list(outcomes)
    sleeps = []
    client = RTPApiClient(
        base_url="http://rtp.test/api/rtp/",
        max_retries=max_retries,
        retry_delay=retry_delay,
        timeout=5,
        session=session,
        sleep=sleeps.append,
    )
    return client, session, sleeps


def test_fetch_returns_decoded_json():
    client, session, sleeps = make_client(make_response(body=[{"id": 1}]))
    assert client.fetch("school-responses", params={"itineraryId": "7"}) == [{"id": 1}]
    session.request.assert_called_once_with(
        method="GET",
        url="http://rtp.test/api/rtp/school-responses",
        params={"itineraryId": "7"},
        json=None,
        timeout=5,
    )
    assert session.headers["Accept"] == "application/json"
    assert sleeps == []


def test_fetch_retries_then_succeeds():
    client, session, sleeps = make_client(
        make_response(500, {"error": "boom"}, "Internal Server Error"),
        make_response(body={"data": []}),
    )
    assert client.fetch("regions") == {"data": []}
    assert session.request.call_count == 2
    assert sleeps == [1.0]


def test_fetch_gives_up_after_max_retries():
    failures = [make_response(500, {"error": "boom"}, "Internal Server Error") for _ in range(4)]
    client, session, sleeps = make_client(*failures, retry_delay=0.5)
    with pytest.raises(RTPApiError) as excinfo:
        client.fetch("output")
    assert session.request.call_count == 4
    assert sleeps == [0.5, 1.0, 1.5]
    error = excinfo.value
    assert error.status == 500
    assert error.endpoint == "output"
    assert error.data == {"error": "boom"}
    assert error.user_message() == "The server encountered an error. Please try again later."


def test_timeout_is_not_retried():
    client, session, sleeps = make_client(requests.Timeout("slow"))
    with pytest.raises(RTPApiError) as excinfo:
        client.fetch("output")
    assert excinfo.value.status == "TIMEOUT"
    assert session.request.call_count == 1
    assert sleeps == []


def test_network_error_is_not_retried():
    client, session, _ = make_client(requests.ConnectionError("refused"))
    with pytest.raises(RTPApiError) as excinfo:
        client.fetch("output")
    assert excinfo.value.status == "NETWORK"
    assert "network error" in excinfo.value.user_message().lower()
    assert session.request.call_count == 1


def test_invalid_json_is_reported_as_unknown():
    client, session, _ = make_client(
        *[make_response(invalid_json=True) for _ in range(2)], max_retries=1, retry_delay=0
    )
    with pytest.raises(RTPApiError) as excinfo:
        client.fetch("regions")
    assert excinfo.value.status == "UNKNOWN"
    assert session.request.call_count == 2


def test_error_status_without_json_body():
    client, _, _ = make_client(make_response(404, reason="Not Found", invalid_json=True), max_retries=0)
    with pytest.raises(RTPApiError) as excinfo:
        client.fetch("submissions/42")
    assert excinfo.value.status == 404
    assert excinfo.value.data is None
    assert excinfo.value.to_dict()["error"] == "API error: 404 Not Found"


def test_unmapped_status_uses_default_message():
    error = RTPApiError("API error: 418", 418, "output")
    assert error.user_message() == "An error occurred while fetching data. Please try again later."


def test_post_is_not_retried():
    client, session, sleeps = make_client(make_response(500, None, "Internal Server Error"))
    with pytest.raises(RTPApiError):
        client.post("submissions", {"survey_type": "school_output"})
    session.request.assert_called_once_with(
        method="POST",
        url="http://rtp.test/api/rtp/submissions",
        params=None,
        json={"survey_type": "school_output"},
        timeout=5,
    )
    assert sleeps == []


def test_fetch_statistics_uses_statistics_root():
    client, session, _ = make_client()
    session.get.return_value = make_response(body={"total_students": 120})
    result = client.fetch_statistics("enrolment", {"school": "GOKA PRESBY PRIMARY"})
    assert result == {"total_students": 120}
    session.get.assert_called_once_with(
        "http://rtp.test/api/statistics/enrolment",
        params={"school": "GOKA PRESBY PRIMARY"},
        timeout=5,
    )


def test_fetch_statistics_raises_on_error_status():
    client, session, _ = make_client()
    session.get.return_value = make_response(404, reason="Not Found")
    with pytest.raises(RTPApiError) as excinfo:
        client.fetch_statistics("teacher-attendance")
    assert excinfo.value.status == 404
    assert excinfo.value.endpoint == "teacher-attendance"
