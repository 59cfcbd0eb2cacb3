# Notification Service for the OmaHub Studio
# Emails designers the outcome of their application

from dataclasses import dataclass
from enum import Enum
from html import escape
from typing import Optional
import logging

from config.app_config import SITE_URL
from core.email_client import EmailClient, EmailDeliveryError
from database.models import DesignerApplication

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """Application outcome notifications."""
    APPROVAL = "approval"
    REJECTION = "rejection"


@dataclass
class OnboardingCredentials:
    """What the designer needs to sign in; never persisted."""
    is_new_account: bool
    password_reset_link: Optional[str] = None
    temporary_password: Optional[str] = None


@dataclass
class NotificationResult:
    success: bool
    error: Optional[str] = None
    message_id: Optional[str] = None


class NotificationService:
    """
    Service for sending application outcome emails.
    Dispatch never raises: failures come back as NotificationResult.
    """

    def __init__(self, email_client: EmailClient, site_url: str = SITE_URL):
        self.email_client = email_client
        self.site_url = site_url

    def dispatch(
        self,
        kind: NotificationType,
        application: DesignerApplication,
        credentials: Optional[OnboardingCredentials] = None,
    ) -> NotificationResult:
        if kind == NotificationType.APPROVAL:
            subject, html = self._approval_email(application, credentials)
        elif kind == NotificationType.REJECTION:
            subject, html = self._rejection_email(application)
        else:
            return NotificationResult(success=False, error=f"Unknown notification type: {kind}")

        try:
            response = self.email_client.send(to=[application.email], subject=subject, html=html)
        except EmailDeliveryError as e:
            logger.warning(f"{kind.value} email to {application.email} not sent: {e}")
            return NotificationResult(success=False, error=str(e))

        message_id = (response or {}).get("id")
        logger.info(f"{kind.value} email sent to {application.email} ({message_id})")
        return NotificationResult(success=True, message_id=message_id)

    # =========================================================================
    # APPLICATION OUTCOME HELPERS
    # =========================================================================

    def notify_application_approved(
        self,
        application: DesignerApplication,
        credentials: Optional[OnboardingCredentials] = None,
    ) -> NotificationResult:
        """Tell the designer they are in, with a reset link or temporary password."""
        return self.dispatch(NotificationType.APPROVAL, application, credentials)

    def notify_application_rejected(self, application: DesignerApplication) -> NotificationResult:
        """Tell the designer the application was declined, with reviewer notes if any."""
        return self.dispatch(NotificationType.REJECTION, application)

    # =========================================================================
    # TEMPLATES
    # =========================================================================

    def _approval_email(self, application, credentials):
        designer = escape(application.designer_name or "there")
        brand = escape(application.brand_name or "your brand")
        login_url = f"{self.site_url}/login"

        if credentials and credentials.password_reset_link:
            access = (
                "<p>Set your password using the secure link below. "
                "The link is valid for 7 days.</p>"
                f'<p><a href="{escape(credentials.password_reset_link)}">Set your password</a></p>'
            )
        elif credentials and credentials.temporary_password:
            access = (
                "<p>Sign in with this temporary password and change it from your studio settings:</p>"
                f"<p><code>{escape(credentials.temporary_password)}</code></p>"
            )
        else:
            access = "<p>Sign in with your existing account to start managing your brand.</p>"

        if credentials is not None and credentials.is_new_account:
            intro = f"We've created a studio account for {brand} using this email address."
        else:
            intro = f"{brand} has been added to your existing studio account."

        html = (
            f"<h2>Hi {designer},</h2>"
            f"<p>Congratulations! Your application for <strong>{brand}</strong> has been approved.</p>"
            f"<p>{intro}</p>"
            f"{access}"
            f'<p><a href="{login_url}">Go to the studio</a></p>'
            "<p>Welcome to OmaHub.</p>"
        )
        return f"Welcome to OmaHub: {application.brand_name} has been approved", html

    def _rejection_email(self, application):
        designer = escape(application.designer_name or "there")
        brand = escape(application.brand_name or "your brand")
        notes = ""
        if application.notes:
            notes = f"<p><strong>Reviewer notes:</strong></p><p>{escape(application.notes)}</p>"

        html = (
            f"<h2>Hi {designer},</h2>"
            f"<p>Thank you for applying to list <strong>{brand}</strong> on OmaHub.</p>"
            "<p>After careful review we are unable to approve your application at this time.</p>"
            f"{notes}"
            "<p>You are welcome to apply again in the future.</p>"
        )
        return f"Your OmaHub application for {application.brand_name}", html


def get_notification_service(email_client: EmailClient) -> NotificationService:
    """Get NotificationService instance."""
    return NotificationService(email_client)
