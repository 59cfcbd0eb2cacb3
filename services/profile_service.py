# Profile reconciliation: grants brand ownership to a provisioned identity

from datetime import datetime
from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth.roles import ELEVATED_ROLES
from database.models import Profile, ProfileRole
from services.results import StepResult

logger = logging.getLogger(__name__)


def merge_owned_brands(existing, brand_id: str) -> list:
    """Union brand_id into the ownership list, keeping order and dropping duplicates."""
    merged = []
    for owned in list(existing or []) + [brand_id]:
        if owned not in merged:
            merged.append(owned)
    return merged


class ProfileService:

    def __init__(self, db: Session):
        self.db = db

    def merge(
        self,
        user_id: str,
        brand_id: str,
        email: str,
        full_name: Optional[str] = None,
    ) -> StepResult[Profile]:
        """
        Find or create the profile keyed by identity id and make it a
        brand_admin owning ``brand_id``.

        Profiles that are already admin or super_admin keep their role and
        only gain the brand in ``owned_brands``.
        """
        try:
            profile = self.db.query(Profile).filter(Profile.id == user_id).first()

            if profile:
                if profile.role not in ELEVATED_ROLES:
                    profile.role = ProfileRole.BRAND_ADMIN
                # Reassign rather than mutate so the JSON column is flagged dirty
                profile.owned_brands = merge_owned_brands(profile.owned_brands, brand_id)
                profile.email = email
                profile.updated_at = datetime.utcnow()
                action = "Updated"
            else:
                profile = Profile(
                    id=user_id,
                    email=email,
                    first_name=full_name,
                    role=ProfileRole.BRAND_ADMIN,
                    owned_brands=[brand_id],
                )
                self.db.add(profile)
                action = "Created"

            self.db.commit()
            self.db.refresh(profile)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to link brand {brand_id} to profile {user_id}: {e}")
            return StepResult.failure("profile", f"Failed to link brand to user profile: {e}", fatal=False)

        logger.info(f"{action} profile {user_id} with owned_brands={profile.owned_brands}")
        return StepResult.success(profile)
