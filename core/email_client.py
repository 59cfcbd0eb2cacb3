# Transactional email via the Resend HTTP API
import requests
from typing import Optional, Dict, Any, List
import logging

from config.app_config import RESEND_API_KEY, EMAIL_FROM, HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the provider."""


class EmailClient:
    """Thin client for sending single emails"""

    BASE_URL = "https://api.resend.com"

    def __init__(
        self,
        api_key: str = RESEND_API_KEY,
        sender: str = EMAIL_FROM,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        }

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(
        self,
        to: List[str],
        subject: str,
        html: str,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email.

        Returns:
            Provider response, containing the message ``id``
        """
        if not self.is_configured:
            raise EmailDeliveryError("Email service not configured. Set RESEND_API_KEY to enable email sending.")

        payload = {
            "from": self.sender,
            "to": to,
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            response = requests.post(
                f"{self.BASE_URL}/emails",
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Email API error: {e}")
            raise EmailDeliveryError(f"Email service error: {str(e)}") from e


def get_email_client() -> EmailClient:
    return EmailClient()
