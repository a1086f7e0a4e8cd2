"""Tests for the SMS provider client."""

from unittest.mock import patch

import httpx
import pytest

from django_boxoffice.settings import SMSConfig
from django_boxoffice.sms.client import SMSClient

API_URL = "https://sms.example.com/v1/message/send-instant"


@pytest.fixture
def client() -> SMSClient:
    return SMSClient(SMSConfig(api_url=API_URL, api_key="test-key", sender_id="BOXOFFICE", timeout=5.0))


def _response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", API_URL), **kwargs)


class TestNormalizePhone:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0712345678", "255712345678"),
            ("0712 345 678", "255712345678"),
            ("+255 (712) 345-678", "255712345678"),
            ("255712345678", "255712345678"),
        ],
    )
    def test_normalize(self, client, raw, expected):
        assert client.normalize_phone(raw) == expected

    def test_uses_configured_country_code(self):
        assert SMSClient(SMSConfig(country_code="254")).normalize_phone("0722000111") == "254722000111"


class TestSend:
    def test_posts_to_provider(self, client):
        with patch(
            "django_boxoffice.sms.client.httpx.post", return_value=_response(200, json={"message_id": "m-1"})
        ) as post:
            result = client.send("0712345678", "Hello")

        assert result.success is True
        assert result.recipient == "255712345678"
        assert result.provider_message_id == "m-1"
        post.assert_called_once_with(
            API_URL,
            json={"content": "Hello", "recipients": ["255712345678"], "sender_id": "BOXOFFICE"},
            headers={"X-API-Key": "test-key"},
            timeout=5.0,
        )

    def test_success_without_json_body(self, client):
        with patch("django_boxoffice.sms.client.httpx.post", return_value=_response(200, text="OK")):
            result = client.send("0712345678", "Hello")

        assert result.success is True
        assert result.provider_message_id == ""

    def test_provider_error_message_is_reported(self, client):
        with patch(
            "django_boxoffice.sms.client.httpx.post",
            return_value=_response(400, json={"message": "Invalid sender id"}),
        ):
            result = client.send("0712345678", "Hello")

        assert result.success is False
        assert result.error == "Invalid sender id"

    def test_provider_error_without_body(self, client):
        with patch("django_boxoffice.sms.client.httpx.post", return_value=_response(502, text="Bad gateway")):
            result = client.send("0712345678", "Hello")

        assert result.success is False
        assert result.error == "Provider returned HTTP 502"

    def test_network_error_is_reported(self, client):
        with patch(
            "django_boxoffice.sms.client.httpx.post",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            result = client.send("0712345678", "Hello")

        assert result.success is False
        assert result.error == "connection refused"

    def test_disabled_does_not_call_provider(self):
        disabled = SMSClient(SMSConfig(enabled=False, api_key="test-key"))
        with patch("django_boxoffice.sms.client.httpx.post") as post:
            result = disabled.send("0712345678", "Hello")

        post.assert_not_called()
        assert result.success is False
        assert result.error == "SMS delivery is disabled"

    def test_missing_api_key_does_not_call_provider(self, caplog):
        unconfigured = SMSClient(SMSConfig(api_key=None))
        with patch("django_boxoffice.sms.client.httpx.post") as post:
            result = unconfigured.send("0712345678", "Hello")

        post.assert_not_called()
        assert result.error == "SMS API key is not configured"
        assert "SMS API key is not configured" in caplog.text

    def test_defaults_to_project_config(self, settings):
        settings.BOXOFFICE = {"sms": {"enabled": True, "api_key": "from-settings", "sender_id": "FEST"}}
        with patch(
            "django_boxoffice.sms.client.httpx.post", return_value=_response(200, json={"id": 7})
        ) as post:
            result = SMSClient().send("0712345678", "Hello")

        assert result.provider_message_id == "7"
        assert post.call_args.kwargs["headers"] == {"X-API-Key": "from-settings"}
        assert post.call_args.kwargs["json"]["sender_id"] == "FEST"
