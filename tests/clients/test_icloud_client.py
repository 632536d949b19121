"""Tests for ICloudHmeClient - uses responses library for HTTP mocking."""

import json
from unittest.mock import Mock

import pytest
import responses
from responses import matchers

from clients.http_transport import HttpResult, HttpTransport, RequestsTransport, TransportError
from clients.icloud_client import (
    USER_AGENT,
    VALIDATE_URL,
    ICloudHmeClient,
    UpstreamDiscoveryError,
    UpstreamRejectedError,
    UpstreamTransportError,
)

COOKIE = "X-APPLE-WEBAUTH-USER=u; X-APPLE-WEBAUTH-TOKEN=t"
BASE_URL = "https://p68-maildomainws.icloud.com"
GENERATE_URL = f"{BASE_URL}/v1/hme/generate"
RESERVE_URL = f"{BASE_URL}/v1/hme/reserve"

VALIDATE_OK = {"webservices": {"premiummailsettings": {"url": BASE_URL, "status": "active"}}}
GENERATE_OK = {"success": True, "timestamp": 1, "result": {"hme": "abc@icloud.com"}}
RESERVE_OK = {
    "success": True,
    "timestamp": 2,
    "result": {
        "hme": {
            "origin": "ON_DEMAND",
            "anonymousId": "x",
            "domain": "",
            "forwardToEmail": "me@example.com",
            "hme": "abc@icloud.com",
            "isActive": True,
            "label": "Bridge",
            "note": "test",
            "createTimestamp": 1700000000000,
            "recipientMailId": "",
        }
    },
}


@pytest.fixture
def client():
    return ICloudHmeClient(RequestsTransport())


def _add_happy_path():
    responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
    responses.add(responses.POST, GENERATE_URL, json=GENERATE_OK)
    responses.add(responses.POST, RESERVE_URL, json=RESERVE_OK)


def _urls() -> list[str]:
    return [call.request.url.split("?")[0] for call in responses.calls]


class TestGenerateAndReserve:
    """Full validate/generate/reserve handshake."""

    @responses.activate
    def test_success(self, client):
        _add_happy_path()

        alias = client.generate_and_reserve(COOKIE, label="Bridge", note="test")

        assert alias.address == "abc@icloud.com"
        assert alias.is_active is True
        assert alias.note == "test"
        assert alias.label == "Bridge"
        assert alias.forward_to_email == "me@example.com"
        assert alias.create_timestamp == 1700000000000
        assert _urls() == [VALIDATE_URL, GENERATE_URL, RESERVE_URL]

    @responses.activate
    def test_reserve_body_carries_generated_address(self, client):
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(responses.POST, GENERATE_URL, json=GENERATE_OK)
        responses.add(
            responses.POST,
            RESERVE_URL,
            json=RESERVE_OK,
            match=[matchers.json_params_matcher(
                {"hme": "abc@icloud.com", "label": "Bridge", "note": "hello"}
            )],
        )

        client.generate_and_reserve(COOKIE, label="Bridge", note="hello")

    @responses.activate
    def test_generate_body(self, client):
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(
            responses.POST,
            GENERATE_URL,
            json=GENERATE_OK,
            match=[matchers.json_params_matcher({"langCode": "en-us"})],
        )
        responses.add(responses.POST, RESERVE_URL, json=RESERVE_OK)

        client.generate_and_reserve(COOKIE, label="Bridge", note="n")

    @responses.activate
    def test_every_call_sends_browser_headers(self, client):
        _add_happy_path()

        client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        for call in responses.calls:
            headers = call.request.headers
            assert headers["Cookie"] == COOKIE
            assert headers["Origin"] == "https://www.icloud.com"
            assert headers["Referer"] == "https://www.icloud.com/"
            assert headers["User-Agent"] == USER_AGENT
            assert headers["Content-Type"] == "application/json"

    @responses.activate
    def test_every_call_sends_client_params(self, client):
        _add_happy_path()

        client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        for call in responses.calls:
            assert call.request.url.endswith(
                "?clientBuildNumber=2420Hotfix12&clientMasteringNumber=2420Hotfix12&clientId=&dsid="
            )

    @responses.activate
    def test_null_forward_email_accepted(self, client):
        reserve = json.loads(json.dumps(RESERVE_OK))
        reserve["result"]["hme"]["forwardToEmail"] = None
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(responses.POST, GENERATE_URL, json=GENERATE_OK)
        responses.add(responses.POST, RESERVE_URL, json=reserve)

        alias = client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert alias.forward_to_email is None


class TestDiscovery:
    """Validate step: locate the premiummailsettings service."""

    @responses.activate
    def test_service_missing_stops_before_generate(self, client):
        responses.add(responses.POST, VALIDATE_URL, json={"webservices": {"mail": {"url": "x"}}})

        with pytest.raises(UpstreamDiscoveryError, match="not found"):
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert _urls() == [VALIDATE_URL]

    @responses.activate
    def test_null_url_stops_before_generate(self, client):
        responses.add(
            responses.POST,
            VALIDATE_URL,
            json={"webservices": {"premiummailsettings": {"url": None}}},
        )

        with pytest.raises(UpstreamDiscoveryError, match="null"):
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert _urls() == [VALIDATE_URL]

    @responses.activate
    def test_validate_returns_base_url(self, client):
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        assert client.validate(COOKIE) == BASE_URL

    @responses.activate
    def test_validate_without_webservices_is_transport_error(self, client):
        responses.add(responses.POST, VALIDATE_URL, json={"dsInfo": {}})

        with pytest.raises(UpstreamTransportError):
            client.validate(COOKIE)


class TestRejection:
    """Envelope success=false aborts the flow."""

    @responses.activate
    def test_generate_rejected_never_reserves(self, client):
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(responses.POST, GENERATE_URL, json={"success": False, "error": "x"})

        with pytest.raises(UpstreamRejectedError) as exc_info:
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert exc_info.value.step == "generate"
        assert exc_info.value.error == "x"
        assert _urls() == [VALIDATE_URL, GENERATE_URL]

    @responses.activate
    def test_reserve_rejected_keeps_error_payload(self, client):
        error = {"errorCode": "-41015", "errorMessage": "limit reached"}
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(responses.POST, GENERATE_URL, json=GENERATE_OK)
        responses.add(responses.POST, RESERVE_URL, json={"success": False, "error": error})

        with pytest.raises(UpstreamRejectedError) as exc_info:
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert exc_info.value.step == "reserve"
        assert exc_info.value.error == error
        assert "Failed to reserve HME" in str(exc_info.value)


class TestTransportFailures:
    """Network, status, and parse failures."""

    @responses.activate
    def test_non_2xx_validate(self, client):
        responses.add(responses.POST, VALIDATE_URL, status=421, body="Misdirected")

        with pytest.raises(UpstreamTransportError) as exc_info:
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert exc_info.value.status_code == 421
        assert _urls() == [VALIDATE_URL]

    @responses.activate
    def test_non_2xx_generate(self, client):
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(responses.POST, GENERATE_URL, status=500, json={"success": True})

        with pytest.raises(UpstreamTransportError):
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert _urls() == [VALIDATE_URL, GENERATE_URL]

    @responses.activate
    def test_invalid_json(self, client):
        responses.add(responses.POST, VALIDATE_URL, body="<html>not json</html>")

        with pytest.raises(UpstreamTransportError, match="not understood"):
            client.validate(COOKIE)

    @responses.activate
    def test_success_without_result(self, client):
        responses.add(responses.POST, VALIDATE_URL, json=VALIDATE_OK)
        responses.add(responses.POST, GENERATE_URL, json={"success": True})

        with pytest.raises(UpstreamTransportError, match="not understood"):
            client.generate_and_reserve(COOKIE, label="Bridge", note="n")

    @responses.activate
    def test_connection_error(self, client):
        responses.add(responses.POST, VALIDATE_URL, body=ConnectionError("Network unreachable"))

        with pytest.raises(UpstreamTransportError, match="validate request failed"):
            client.validate(COOKIE)


class TestInjectedTransport:
    """Protocol code depends only on the HttpTransport interface."""

    def test_uses_injected_transport(self):
        transport = Mock(spec=HttpTransport)
        transport.post.side_effect = [
            HttpResult(status_code=200, text=json.dumps(VALIDATE_OK)),
            HttpResult(status_code=200, text=json.dumps(GENERATE_OK)),
            HttpResult(status_code=200, text=json.dumps(RESERVE_OK)),
        ]

        alias = ICloudHmeClient(transport).generate_and_reserve(COOKIE, label="Bridge", note="n")

        assert alias.address == "abc@icloud.com"
        assert [c.args[0] for c in transport.post.call_args_list] == [
            VALIDATE_URL, GENERATE_URL, RESERVE_URL,
        ]

    def test_transport_error_wrapped(self):
        transport = Mock(spec=HttpTransport)
        transport.post.side_effect = TransportError("Connection failed: boom")

        with pytest.raises(UpstreamTransportError):
            ICloudHmeClient(transport).validate(COOKIE)
