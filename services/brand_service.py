# Brand provisioning and verification for approved designer applications

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.app_config import DEFAULT_PRICE_RANGE
from database.models import Brand, DesignerApplication, Profile, generate_uuid
from services.results import StepResult

logger = logging.getLogger(__name__)


@dataclass
class BrandProvision:
    brand: Brand
    created: bool


def normalize_instagram(handle: Optional[str]) -> Optional[str]:
    """Return the handle with exactly one leading '@', or None when blank."""
    if not handle or not handle.strip():
        return None
    return "@" + handle.strip().lstrip("@")


def _application_fields(application: DesignerApplication) -> dict:
    """Brand columns that can be filled from an application, non-empty only."""
    fields = {
        "description": application.description,
        "long_description": application.description,
        "location": application.location,
        "category": application.category,
        "categories": [application.category] if application.category else None,
        "website": application.website,
        "instagram": normalize_instagram(application.instagram),
        "whatsapp": application.phone,
        "founded_year": application.year_founded,
    }
    return {k: v for k, v in fields.items() if v not in (None, "", [])}


class BrandService:
    """
    Finds or creates the brand an application refers to, and verifies it
    once ownership has been linked.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_unverified(self, name: str, contact_email: str) -> Optional[Brand]:
        return self.db.query(Brand).filter(
            Brand.name == name,
            Brand.contact_email == contact_email,
            Brand.is_verified == False
        ).first()

    def find_owned(self, name: str, contact_email: str) -> Optional[Brand]:
        """A brand with this name already granted to a profile with the same email."""
        owned = []
        profiles = self.db.query(Profile).filter(
            func.lower(Profile.email) == contact_email.strip().lower()
        ).all()
        for profile in profiles:
            owned.extend(profile.owned_brands or [])
        if not owned:
            return None

        return self.db.query(Brand).filter(
            Brand.id.in_(owned),
            Brand.name == name,
            Brand.contact_email == contact_email,
        ).first()

    def provision(self, application: DesignerApplication) -> StepResult[BrandProvision]:
        """
        Reuse the applicant's unverified brand, or the brand an earlier
        approval already linked to their profile, before creating one.
        """
        try:
            brand = (
                self.find_unverified(application.brand_name, application.email)
                or self.find_owned(application.brand_name, application.email)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Brand lookup failed for '{application.brand_name}': {e}")
            return StepResult.failure("brand", f"Failed to look up brand: {e}")

        if brand:
            return self._merge_into_existing(brand, application)
        return self._create(application)

    def _merge_into_existing(self, brand: Brand, application: DesignerApplication) -> StepResult[BrandProvision]:
        brand_id, brand_name = brand.id, brand.name
        missing = {
            field: value
            for field, value in _application_fields(application).items()
            if getattr(brand, field) in (None, "", [])
        }
        if not missing:
            logger.info(f"Reusing brand {brand_id} ({brand_name})")
            return StepResult.success(BrandProvision(brand=brand, created=False))

        try:
            for field, value in missing.items():
                setattr(brand, field, value)
            brand.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(brand)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Could not merge application details into brand {brand_id}: {e}")
            return StepResult.success(
                BrandProvision(brand=brand, created=False),
                warnings=[f"Brand details could not be updated: {e}"],
            )

        logger.info(f"Reusing brand {brand_id}, filled {sorted(missing)}")
        return StepResult.success(BrandProvision(brand=brand, created=False))

    def _create(self, application: DesignerApplication) -> StepResult[BrandProvision]:
        values = {"categories": [], **_application_fields(application)}
        brand = Brand(
            id=generate_uuid(),
            name=application.brand_name,
            contact_email=application.email,
            is_verified=False,
            rating=0,
            price_range=DEFAULT_PRICE_RANGE,
            **values,
        )
        try:
            self.db.add(brand)
            self.db.commit()
            self.db.refresh(brand)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create brand '{application.brand_name}': {e}")
            return StepResult.failure("brand", f"Failed to create brand: {e}")

        logger.info(f"Created brand {brand.id} ({brand.name})")
        return StepResult.success(BrandProvision(brand=brand, created=True))

    def verify(self, brand_id: str) -> StepResult[None]:
        """Mark the brand verified. Failure is never fatal."""
        try:
            updated = self.db.query(Brand).filter(Brand.id == brand_id).update({
                "is_verified": True,
                "updated_at": datetime.utcnow(),
            })
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Failed to verify brand {brand_id}: {e}")
            return StepResult.failure("verify", f"Failed to verify brand: {e}", fatal=False)

        if not updated:
            logger.warning(f"Brand {brand_id} disappeared before verification")
            return StepResult.failure("verify", "Brand not found for verification", fatal=False)
        return StepResult.success()
