# Designer application review workflow
#
# Status changes are the only required write. Everything after it on approval
# (brand, identity, profile, verification, email) runs as a sequence of
# independent commits; failures become warnings and nothing is rolled back.

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union
import logging

from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.orm import Session

from core.identity_provider import IdentityProvider
from database.models import ApplicationStatus, DesignerApplication
from services.brand_service import BrandService
from services.errors import InvalidRequest, NotFound, PersistenceError
from services.identity_service import IdentityService
from services.notification_service import NotificationService, OnboardingCredentials
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    application: DesignerApplication
    message: str
    success: bool = True
    brand: Optional[dict] = None
    user: Optional[dict] = None
    temporary_password: Optional[str] = None
    password_reset_link: Optional[str] = None
    warning: Optional[str] = None
    note: Optional[str] = None
    brand_created: Optional[bool] = None
    user_created: Optional[bool] = None


@dataclass
class DeletionOutcome:
    deleted_application: dict
    brand_deleted: bool = False
    rows_deleted: int = 0
    success: bool = True


@dataclass
class _PipelineState:
    warnings: List[str] = field(default_factory=list)

    def joined(self) -> Optional[str]:
        return "; ".join(self.warnings) if self.warnings else None


def parse_status(value: Union[ApplicationStatus, str, None]) -> ApplicationStatus:
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise InvalidRequest(f"Invalid status. Must be one of: {allowed}")


class ApplicationReviewService:
    """
    Orchestrates status transitions and deletions of designer applications.

    Collaborators are injected so the data store, auth provider and email
    transport can be replaced independently.
    """

    def __init__(
        self,
        db: Session,
        identity_provider: IdentityProvider,
        notifier: NotificationService,
        brands: Optional[BrandService] = None,
        identities: Optional[IdentityService] = None,
        profiles: Optional[ProfileService] = None,
    ):
        self.db = db
        self.notifier = notifier
        self.brands = brands or BrandService(db)
        self.identities = identities or IdentityService(db, identity_provider)
        self.profiles = profiles or ProfileService(db)

    # =========================================================================
    # READS
    # =========================================================================

    def _load(self, application_id: str) -> DesignerApplication:
        try:
            return self.db.query(DesignerApplication).filter(
                DesignerApplication.id == application_id
            ).one()
        except NoResultFound:
            raise NotFound("Application not found")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to fetch application {application_id}: {e}")
            raise PersistenceError("Failed to fetch application", details=str(e))

    def get_application(self, application_id: str) -> DesignerApplication:
        return self._load(application_id)

    def list_applications(self, status: Optional[ApplicationStatus] = None) -> List[DesignerApplication]:
        """All applications, newest first; rows without created_at sort by updated_at."""
        try:
            query = self.db.query(DesignerApplication)
            if status is not None:
                query = query.filter(DesignerApplication.status == status)
            applications = query.all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to fetch applications: {e}")
            raise PersistenceError("Failed to fetch applications", details=str(e))

        return sorted(
            applications,
            key=lambda a: a.created_at or a.updated_at or datetime.min,
            reverse=True,
        )

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    def submit_application(self, **fields) -> DesignerApplication:
        """Store a new application and make sure its unverified brand exists."""
        application = DesignerApplication(status=ApplicationStatus.NEW, **fields)
        try:
            self.db.add(application)
            self.db.commit()
            self.db.refresh(application)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to store application for '{fields.get('brand_name')}': {e}")
            raise PersistenceError("Failed to submit application", details=str(e))

        result = self.brands.provision(application)
        if not result.ok:
            logger.warning(f"Application {application.id} stored without a brand: {result.error}")
        return application

    # =========================================================================
    # STATUS TRANSITIONS
    # =========================================================================

    def update_status(
        self,
        application_id: str,
        status: Union[ApplicationStatus, str],
        notes: Optional[str] = None,
        reviewer_id: Optional[str] = None,
    ) -> ReviewOutcome:
        new_status = parse_status(status)
        application = self._load(application_id)

        now = datetime.utcnow()
        try:
            application.status = new_status
            if notes is not None:
                application.notes = notes
            application.updated_at = now
            if new_status != ApplicationStatus.NEW:
                application.reviewed_at = now
                application.reviewed_by = reviewer_id
            self.db.commit()
            self.db.refresh(application)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update application {application_id} to {new_status.value}: {e}")
            raise PersistenceError("Failed to update application", details=str(e))

        logger.info(f"Application {application_id} ({application.brand_name}) -> {new_status.value}")
        outcome = ReviewOutcome(
            application=application,
            message=f"Application status updated to {new_status.value}",
        )

        if new_status == ApplicationStatus.APPROVED:
            self._run_approval(application, outcome)
        elif new_status == ApplicationStatus.REJECTED:
            self._notify_rejection(application)

        return outcome

    def _run_approval(self, application: DesignerApplication, outcome: ReviewOutcome) -> None:
        state = _PipelineState()

        brand_result = self.brands.provision(application)
        state.warnings.extend(brand_result.warnings)
        if not brand_result.ok:
            outcome.brand_created = False
            state.warnings.append(f"Application approved, but the brand could not be created ({brand_result.error.message})")
            outcome.warning = state.joined()
            return

        brand = brand_result.value.brand
        brand_id = brand.id
        outcome.brand_created = True
        outcome.brand = {"id": brand_id, "name": brand.name, "created": brand_result.value.created}

        identity_result = self.identities.provision(
            application.email,
            designer_name=application.designer_name,
            brand_name=application.brand_name,
        )
        if not identity_result.ok:
            outcome.user_created = False
            state.warnings.append(
                f"Brand '{brand.name}' is ready, but the user account could not be created "
                f"({identity_result.error.message})"
            )
            outcome.warning = state.joined()
            return

        identity = identity_result.value
        outcome.user_created = True
        outcome.user = {"id": identity.user_id, "email": identity.email, "created": identity.created}

        if identity.created:
            outcome.temporary_password = identity.temporary_password
            link_result = self.identities.generate_reset_link(identity.email)
            if link_result.ok:
                outcome.password_reset_link = link_result.value
            else:
                state.warnings.append("Password reset link could not be generated; share the temporary password instead")
        else:
            outcome.note = (
                f"An account already exists for {identity.email}; "
                "the designer can sign in with their current password"
            )

        profile_result = self.profiles.merge(
            identity.user_id,
            brand_id,
            identity.email,
            full_name=application.designer_name,
        )
        if profile_result.ok:
            verify_result = self.brands.verify(brand_id)
            if not verify_result.ok:
                state.warnings.append(f"Brand could not be marked as verified ({verify_result.error.message})")
        else:
            state.warnings.append(
                f"User account is ready, but brand ownership could not be linked ({profile_result.error.message})"
            )

        credentials = OnboardingCredentials(
            is_new_account=identity.created,
            password_reset_link=outcome.password_reset_link,
            temporary_password=outcome.temporary_password,
        )
        notification = self.notifier.notify_application_approved(application, credentials)
        if not notification.success:
            logger.warning(f"Approval email for application {application.id} failed: {notification.error}")

        outcome.warning = state.joined()

    def _notify_rejection(self, application: DesignerApplication) -> None:
        notification = self.notifier.notify_application_rejected(application)
        if not notification.success:
            logger.warning(f"Rejection email for application {application.id} failed: {notification.error}")

    # =========================================================================
    # DELETION
    # =========================================================================

    def delete_application(self, application_id: str) -> DeletionOutcome:
        """
        Delete an application. A rejected application also takes its
        unverified brand with it, unless another non-approved application
        with the same brand name and email still refers to that brand.
        """
        if not application_id or not application_id.strip():
            raise InvalidRequest("Application ID is required")

        application = self._load(application_id)
        outcome = DeletionOutcome(deleted_application={
            "id": application.id,
            "brand_name": application.brand_name,
            "designer_name": application.designer_name,
        })

        if application.status == ApplicationStatus.REJECTED and application.brand_name and application.email:
            outcome.brand_deleted = self._cascade_brand(application)

        try:
            outcome.rows_deleted = self.db.query(DesignerApplication).filter(
                DesignerApplication.id == application_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete application {application_id}: {e}")
            raise PersistenceError("Failed to delete application", details=str(e))

        if outcome.rows_deleted == 0:
            logger.info(f"Application {application_id} was already deleted")
        return outcome

    def _cascade_brand(self, application: DesignerApplication) -> bool:
        try:
            brand = self.brands.find_unverified(application.brand_name, application.email)
            if brand is None:
                return False

            siblings = self.db.query(DesignerApplication).filter(
                DesignerApplication.brand_name == application.brand_name,
                DesignerApplication.email == application.email,
                DesignerApplication.id != application.id,
                DesignerApplication.status != ApplicationStatus.APPROVED,
            ).count()
            if siblings:
                logger.info(
                    f"Keeping brand {brand.id}: {siblings} other pending application(s) reference it"
                )
                return False

            self.db.delete(brand)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Could not remove brand for rejected application {application.id}: {e}")
            return False

        logger.info(f"Deleted unverified brand for rejected application {application.id}")
        return True
