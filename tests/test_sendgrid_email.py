import json
import pytest
from unittest.mock import patch
from urllib.error import URLError

from python_http_client.exceptions import HTTPError

from parkpass.infrastructure.notifications.sendgrid_email import SendGridEmailSender
from parkpass.domain.exceptions import EmailNotConfiguredError, EmailDeliveryError


def _http_error(message):
    body = json.dumps({"errors": [{"message": message, "field": "from"}]}).encode()
    return HTTPError(403, "Forbidden", body, {})


class TestSendGridEmailSender:
    """Test the SendGrid email adapter."""

    async def test_send(self):
        sender = SendGridEmailSender(api_key="SG.test", sender_email="passes@parkpass.test")

        with patch("parkpass.infrastructure.notifications.sendgrid_email.SendGridAPIClient") as client_cls:
            await sender.send("driver@example.com", "Parking Pass", "<p>pass</p>", text="pass")

        client_cls.assert_called_once_with("SG.test")
        message = client_cls.return_value.send.call_args.args[0].get()
        assert message["subject"] == "Parking Pass"
        assert message["from"]["email"] == "passes@parkpass.test"
        assert message["personalizations"][0]["to"][0]["email"] == "driver@example.com"
        assert {c["type"] for c in message["content"]} == {"text/plain", "text/html"}

    async def test_missing_api_key(self):
        sender = SendGridEmailSender(api_key="", sender_email="passes@parkpass.test")
        with pytest.raises(EmailNotConfiguredError, match="Email service not configured"):
            await sender.send("driver@example.com", "Parking Pass", "<p>pass</p>")

    async def test_missing_sender(self):
        sender = SendGridEmailSender(api_key="SG.test", sender_email="")
        with pytest.raises(EmailNotConfiguredError, match="Sender email not configured"):
            await sender.send("driver@example.com", "Parking Pass", "<p>pass</p>")

    async def test_unverified_sender(self):
        sender = SendGridEmailSender(api_key="SG.test", sender_email="passes@parkpass.test")

        with patch("parkpass.infrastructure.notifications.sendgrid_email.SendGridAPIClient") as client_cls:
            client_cls.return_value.send.side_effect = _http_error(
                "The from address does not match a verified Sender Identity."
            )
            with pytest.raises(EmailDeliveryError, match="Sender email not verified") as exc_info:
                await sender.send("driver@example.com", "Parking Pass", "<p>pass</p>")

        assert "Sender Identity" in exc_info.value.details

    async def test_other_delivery_error(self):
        sender = SendGridEmailSender(api_key="SG.test", sender_email="passes@parkpass.test")

        with patch("parkpass.infrastructure.notifications.sendgrid_email.SendGridAPIClient") as client_cls:
            client_cls.return_value.send.side_effect = _http_error("Rate limit exceeded")
            with pytest.raises(EmailDeliveryError, match="Failed to send email") as exc_info:
                await sender.send("driver@example.com", "Parking Pass", "<p>pass</p>")

        assert exc_info.value.details == "Rate limit exceeded"

    async def test_network_error_is_wrapped(self):
        sender = SendGridEmailSender(api_key="SG.test", sender_email="passes@parkpass.test")

        with patch("parkpass.infrastructure.notifications.sendgrid_email.SendGridAPIClient") as client_cls:
            client_cls.return_value.send.side_effect = URLError("connection refused")
            with pytest.raises(EmailDeliveryError, match="Failed to send email") as exc_info:
                await sender.send("driver@example.com", "Parking Pass", "<p>pass</p>")

        assert "connection refused" in exc_info.value.details
        assert isinstance(exc_info.value.__cause__, URLError)
