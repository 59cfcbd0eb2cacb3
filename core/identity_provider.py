# Auth provider admin client (Supabase GoTrue admin API)
import requests
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging

from config.app_config import (
    SUPABASE_URL,
    SUPABASE_SERVICE_ROLE_KEY,
    IDENTITY_PAGE_SIZE,
    HTTP_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the auth provider rejects or fails a request."""


@dataclass
class Identity:
    id: str
    email: str


class IdentityProvider:
    """Service-role client for managing identities at the auth provider"""

    def __init__(
        self,
        base_url: str = SUPABASE_URL,
        service_key: str = SUPABASE_SERVICE_ROLE_KEY,
        page_size: int = IDENTITY_PAGE_SIZE,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.base_url = f"{base_url}/auth/v1" if base_url else ""
        self.page_size = page_size
        self.timeout = timeout
        self.headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json"
        }

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.headers["apikey"])

    def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        """Make a request to the auth admin API"""
        if not self.is_configured:
            raise IdentityProviderError("Auth provider is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")

        url = f"{self.base_url}{endpoint}"
        try:
            if method == "GET":
                response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
            elif method == "POST":
                response = requests.post(url, headers=self.headers, json=data, timeout=self.timeout)
            else:
                raise ValueError(f"Unsupported method: {method}")

            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Auth provider API error: {e}")
            raise IdentityProviderError(f"Auth provider error: {str(e)}") from e

    def find_user_by_email(self, email: str) -> Optional[Identity]:
        """
        Scan the provider's user list for an email match (case-insensitive).

        The admin API has no lookup-by-email, so this pages through every
        identity. It is the expensive path; callers try the profiles table first.
        """
        target = email.strip().lower()
        page = 1
        while True:
            result = self._make_request(
                "GET",
                "/admin/users",
                params={"page": page, "per_page": self.page_size},
            )
            users = result.get("users", [])
            for user in users:
                if (user.get("email") or "").lower() == target:
                    return Identity(id=user["id"], email=user["email"])
            if len(users) < self.page_size:
                return None
            page += 1

    def create_user(
        self,
        email: str,
        password: str,
        user_metadata: Optional[Dict] = None,
    ) -> Identity:
        """Create an identity with the email already confirmed."""
        result = self._make_request("POST", "/admin/users", {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": user_metadata or {},
        })
        user = result.get("user", result)
        if not user.get("id"):
            raise IdentityProviderError("Auth provider returned no user id")
        return Identity(id=user["id"], email=user.get("email", email))

    def generate_recovery_link(self, email: str, redirect_to: str) -> str:
        """
        Generate a password-recovery link for an existing identity.

        Links expire according to the provider's settings (7 days by default
        for this project).
        """
        result = self._make_request("POST", "/admin/generate_link", {
            "type": "recovery",
            "email": email,
            "redirect_to": redirect_to,
        })
        link = result.get("action_link") or result.get("properties", {}).get("action_link")
        if not link:
            raise IdentityProviderError("Auth provider returned no recovery link")
        return link


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the configured provider client."""
    return IdentityProvider()
