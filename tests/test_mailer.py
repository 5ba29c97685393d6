import json

import pytest
import requests
import responses

from pragatibook.mailer import BREVO_API_URL, BrevoMailer, get_mailer

SEND_URL = f"{BREVO_API_URL}/smtp/email"


@pytest.fixture()
def mailer() -> BrevoMailer:
    return BrevoMailer(api_key="test-key", sender_email="noreply@example.com", sender_name="Support")


class TestSendEmail:
    @responses.activate
    def test_posts_payload(self, mailer):
        responses.add(responses.POST, SEND_URL, json={"messageId": "<1@brevo>"}, status=201)

        assert mailer.send_email("asha@example.com", "Hello", "<p>Hi <b>there</b></p>") is True

        request = responses.calls[0].request
        assert request.headers["api-key"] == "test-key"
        body = json.loads(request.body)
        assert body["sender"] == {"name": "Support", "email": "noreply@example.com"}
        assert body["to"] == [{"email": "asha@example.com"}]
        assert body["subject"] == "Hello"
        assert body["htmlContent"] == "<p>Hi <b>there</b></p>"
        assert body["textContent"] == "Hi there"

    @responses.activate
    def test_explicit_text_content(self, mailer):
        responses.add(responses.POST, SEND_URL, json={}, status=201)
        mailer.send_email("asha@example.com", "Hello", "<p>Hi</p>", text_content="plain")
        assert json.loads(responses.calls[0].request.body)["textContent"] == "plain"

    @responses.activate
    def test_api_error_returns_false(self, mailer):
        responses.add(responses.POST, SEND_URL, json={"message": "Key not found"}, status=401)
        assert mailer.send_email("asha@example.com", "Hello", "<p>Hi</p>") is False

    @responses.activate
    def test_network_error_returns_false(self, mailer):
        responses.add(responses.POST, SEND_URL, body=requests.exceptions.ConnectionError("refused"))
        assert mailer.send_email("asha@example.com", "Hello", "<p>Hi</p>") is False


class TestSendOtpEmail:
    @responses.activate
    def test_includes_code_and_escaped_name(self, mailer):
        responses.add(responses.POST, SEND_URL, json={}, status=201)

        assert mailer.send_otp_email("asha@example.com", "482913", "Asha <script>") is True

        body = json.loads(responses.calls[0].request.body)
        assert "482913" in body["htmlContent"]
        assert "Asha &lt;script&gt;" in body["htmlContent"]
        assert "Password Reset OTP" in body["subject"]
        assert "10 minutes" in body["htmlContent"]


def test_get_mailer_uses_settings(monkeypatch):
    from pragatibook import mailer as mailer_module

    monkeypatch.setattr(mailer_module.settings, "brevo_api_key", "from-settings")
    assert get_mailer().api_key == "from-settings"
