# Pydantic Schemas for the Designer Applications API

from pydantic import BaseModel, Field, EmailStr, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from database.models import ApplicationStatus


# ============================================================================
# REQUESTS
# ============================================================================

class ApplicationCreate(BaseModel):
    brand_name: str = Field(..., min_length=1, max_length=255)
    designer_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    location: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    year_founded: Optional[int] = Field(None, ge=1800, le=2100)

    @field_validator("brand_name", "designer_name", "location", "category")
    @classmethod
    def strip_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None


# ============================================================================
# RESPONSES
# ============================================================================

class ApplicationResponse(BaseModel):
    id: str
    brand_name: str
    designer_name: str
    email: str
    phone: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    location: str
    category: str
    description: str
    year_founded: Optional[int] = None
    status: ApplicationStatus
    notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def fill_missing_timestamps(self):
        """Older rows may lack one of the timestamps; borrow from the other."""
        if self.created_at is None or self.updated_at is None:
            fallback = self.created_at or self.updated_at or datetime.utcnow()
            self.created_at = self.created_at or fallback
            self.updated_at = self.updated_at or fallback
        return self


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    count: int
    timestamp: datetime


class BrandSummary(BaseModel):
    id: str
    name: str
    created: bool


class UserSummary(BaseModel):
    id: str
    email: str
    created: bool


class ApplicationReviewResponse(BaseModel):
    success: bool = True
    application: ApplicationResponse
    message: str
    brand: Optional[BrandSummary] = None
    user: Optional[UserSummary] = None
    temporary_password: Optional[str] = Field(None, alias="temporaryPassword")
    password_reset_link: Optional[str] = Field(None, alias="passwordResetLink")
    warning: Optional[str] = None
    note: Optional[str] = None
    brand_created: Optional[bool] = Field(None, alias="brandCreated")
    user_created: Optional[bool] = Field(None, alias="userCreated")

    class Config:
        populate_by_name = True


class DeletedApplication(BaseModel):
    id: str
    brand_name: Optional[str] = None
    designer_name: Optional[str] = None


class ApplicationDeleteResponse(BaseModel):
    success: bool = True
    message: str
    deleted_application: DeletedApplication = Field(..., alias="deletedApplication")
    brand_deleted: bool = Field(False, alias="brandDeleted")

    class Config:
        populate_by_name = True
