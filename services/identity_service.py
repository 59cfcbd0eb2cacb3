# Identity provisioning for approved designers

from dataclasses import dataclass
from typing import Optional
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.app_config import SITE_URL, TEMPORARY_PASSWORD_LENGTH
from core.credentials import generate_temporary_password
from core.identity_provider import IdentityProvider, IdentityProviderError
from database.models import Profile, ProfileRole
from services.results import StepResult

logger = logging.getLogger(__name__)


@dataclass
class ProvisionedIdentity:
    user_id: str
    email: str
    created: bool
    temporary_password: Optional[str] = None


class IdentityService:
    """
    Resolves the auth-provider identity for an applicant's email, creating
    one only when neither a profile nor a provider identity exists.

    Lookup order: profiles table, then the provider-wide user scan, then
    creation. The profile check is local and cheap; the scan pages through
    every identity at the provider.
    """

    def __init__(self, db: Session, provider: IdentityProvider, site_url: str = SITE_URL):
        self.db = db
        self.provider = provider
        self.site_url = site_url

    def provision(
        self,
        email: str,
        designer_name: Optional[str] = None,
        brand_name: Optional[str] = None,
    ) -> StepResult[ProvisionedIdentity]:
        normalized = email.strip().lower()

        try:
            profile = self.db.query(Profile).filter(
                func.lower(Profile.email) == normalized
            ).first()
        except SQLAlchemyError as e:
            # Not fatal: the provider scan below covers the same ground
            self.db.rollback()
            logger.warning(f"Profile lookup by email failed, falling back to provider scan: {e}")
            profile = None

        if profile:
            logger.info(f"Found existing profile {profile.id} for {normalized}")
            return StepResult.success(ProvisionedIdentity(user_id=profile.id, email=email, created=False))

        try:
            identity = self.provider.find_user_by_email(normalized)
        except IdentityProviderError as e:
            logger.warning(f"Provider user scan failed for {normalized}, attempting creation: {e}")
            identity = None

        if identity:
            logger.info(f"Found existing identity {identity.id} for {normalized}")
            return StepResult.success(ProvisionedIdentity(user_id=identity.id, email=identity.email, created=False))

        password = generate_temporary_password(TEMPORARY_PASSWORD_LENGTH)
        try:
            identity = self.provider.create_user(
                email=email,
                password=password,
                user_metadata={
                    "full_name": designer_name,
                    "brand_name": brand_name,
                    "role": ProfileRole.BRAND_ADMIN.value,
                },
            )
        except IdentityProviderError as e:
            logger.error(f"Failed to create identity for {normalized}: {e}")
            return StepResult.failure("identity", f"Failed to create user account: {e}")

        logger.info(f"Created identity {identity.id} for {normalized}")
        return StepResult.success(ProvisionedIdentity(
            user_id=identity.id,
            email=identity.email,
            created=True,
            temporary_password=password,
        ))

    def generate_reset_link(self, email: str) -> StepResult[str]:
        """Recovery link that lands on the site's reset page. Never fatal."""
        try:
            link = self.provider.generate_recovery_link(email, redirect_to=f"{self.site_url}/reset-password")
        except IdentityProviderError as e:
            logger.warning(f"Could not generate password reset link for {email}: {e}")
            return StepResult.failure("reset_link", str(e), fatal=False)
        return StepResult.success(link)
