# Schemas module for the OmaHub Studio

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

__all__ = [
    # Requests
    "ApplicationCreate",
    "ApplicationStatusUpdate",

    # Responses
    "ApplicationResponse",
    "ApplicationListResponse",
    "ApplicationReviewResponse",
    "ApplicationDeleteResponse",
    "BrandSummary",
    "UserSummary",
    "DeletedApplication",
]
