import asyncio
import json
from typing import Optional

from loguru import logger
from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from parkpass.application.gateways import AbstractEmailSender
from parkpass.config.settings_env import settings
from parkpass.domain.exceptions import EmailNotConfiguredError, EmailDeliveryError


def _first_error_message(error: HTTPError) -> Optional[str]:
    body = getattr(error, "body", None)
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return None
    errors = payload.get("errors") or []
    return errors[0].get("message") if errors else None


class SendGridEmailSender(AbstractEmailSender):
    def __init__(self, api_key: Optional[str] = None, sender_email: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.SENDGRID_API_KEY
        self.sender_email = sender_email if sender_email is not None else settings.SENDGRID_SENDER_EMAIL

    async def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> None:
        if not self.api_key:
            logger.error("SENDGRID_API_KEY is not configured")
            raise EmailNotConfiguredError("Email service not configured")
        if not self.sender_email:
            logger.error("SENDGRID_SENDER_EMAIL is not configured")
            raise EmailNotConfiguredError("Sender email not configured")

        message = Mail(
            from_email=self.sender_email,
            to_emails=to,
            subject=subject,
            html_content=html,
            plain_text_content=text,
        )
        client = SendGridAPIClient(self.api_key)

        try:
            await asyncio.to_thread(client.send, message)
        except HTTPError as e:
            logger.error(f"SendGrid error: {e}")
            details = _first_error_message(e)
            if details and "Sender Identity" in details:
                raise EmailDeliveryError(
                    "Sender email not verified in SendGrid. Please verify your sender identity in SendGrid dashboard.",
                    details=details,
                ) from e
            raise EmailDeliveryError("Failed to send email", details=details) from e
        except Exception as e:
            logger.exception(f"SendGrid request failed: {e}")
            raise EmailDeliveryError("Failed to send email", details=str(e)) from e

        logger.info(f"Email '{subject}' sent to {to}")
