# Designer Applications Router for the OmaHub Studio
# Review, approval provisioning and deletion of designer applications

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from database.config import get_db
from database.models import Profile, ApplicationStatus
from core.identity_provider import IdentityProvider, get_identity_provider
from core.email_client import EmailClient, get_email_client
from services.application_service import ApplicationReviewService
from services.errors import ApplicationError, InvalidRequest, NotFound
from services.notification_service import get_notification_service
from schemas.applications import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    ApplicationResponse,
    ApplicationListResponse,
    ApplicationReviewResponse,
    ApplicationDeleteResponse,
    BrandSummary,
    UserSummary,
    DeletedApplication,
)
from auth.roles import Permission
from auth.decorators import require_permission

router = APIRouter(prefix="/api/studio/applications", tags=["Designer Applications"])


def get_review_service(
    db: Session = Depends(get_db),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    email_client: EmailClient = Depends(get_email_client),
) -> ApplicationReviewService:
    return ApplicationReviewService(
        db,
        identity_provider=identity_provider,
        notifier=get_notification_service(email_client),
    )


def _http_error(e: ApplicationError) -> HTTPException:
    """Translate a workflow error into the API's {error, details} body."""
    if isinstance(e, InvalidRequest):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(e, NotFound):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR

    detail = {"error": e.message}
    if e.details:
        detail["details"] = e.details
    return HTTPException(status_code=code, detail=detail)


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@router.post("/", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    application_data: ApplicationCreate,
    service: ApplicationReviewService = Depends(get_review_service),
):
    """Submit a designer application. The brand is reserved as unverified."""
    try:
        application = service.submit_application(**application_data.model_dump())
    except ApplicationError as e:
        raise _http_error(e)
    return ApplicationResponse.model_validate(application)


# ============================================================================
# ADMIN ENDPOINTS
# ============================================================================

@router.get("/", response_model=ApplicationListResponse)
async def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    service: ApplicationReviewService = Depends(get_review_service),
    current_profile: Profile = Depends(require_permission(Permission.REVIEW_APPLICATIONS)),
):
    """All applications, newest first."""
    try:
        applications = service.list_applications(status_filter)
    except ApplicationError as e:
        raise _http_error(e)

    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        count=len(applications),
        timestamp=datetime.utcnow(),
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    service: ApplicationReviewService = Depends(get_review_service),
    current_profile: Profile = Depends(require_permission(Permission.REVIEW_APPLICATIONS)),
):
    try:
        application = service.get_application(application_id)
    except ApplicationError as e:
        raise _http_error(e)
    return ApplicationResponse.model_validate(application)


@router.put(
    "/{application_id}",
    response_model=ApplicationReviewResponse,
    response_model_exclude_none=True,
)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    service: ApplicationReviewService = Depends(get_review_service),
    current_profile: Profile = Depends(require_permission(Permission.REVIEW_APPLICATIONS)),
):
    """
    Move an application to a new status.

    Approval provisions the brand, the designer's account and brand
    ownership. Provisioning problems do not fail the request: the status
    change stands and the response carries a `warning`.
    """
    try:
        outcome = service.update_status(
            application_id,
            update.status,
            notes=update.notes,
            reviewer_id=current_profile.id,
        )
    except ApplicationError as e:
        raise _http_error(e)

    return ApplicationReviewResponse(
        success=outcome.success,
        application=ApplicationResponse.model_validate(outcome.application),
        message=outcome.message,
        brand=BrandSummary(**outcome.brand) if outcome.brand else None,
        user=UserSummary(**outcome.user) if outcome.user else None,
        temporary_password=outcome.temporary_password,
        password_reset_link=outcome.password_reset_link,
        warning=outcome.warning,
        note=outcome.note,
        brand_created=outcome.brand_created,
        user_created=outcome.user_created,
    )


@router.delete("/{application_id}", response_model=ApplicationDeleteResponse)
async def delete_application(
    application_id: str,
    service: ApplicationReviewService = Depends(get_review_service),
    current_profile: Profile = Depends(require_permission(Permission.DELETE_APPLICATIONS)),
):
    """Delete an application; rejected ones may take their unverified brand along."""
    try:
        outcome = service.delete_application(application_id)
    except ApplicationError as e:
        raise _http_error(e)

    message = "Application deleted successfully"
    if outcome.rows_deleted == 0:
        message = "Application was already deleted"
    if outcome.brand_deleted:
        message += " (associated brand removed)"

    return ApplicationDeleteResponse(
        success=outcome.success,
        message=message,
        deleted_application=DeletedApplication(**outcome.deleted_application),
        brand_deleted=outcome.brand_deleted,
    )
