# Database Models for the OmaHub Studio

from sqlalchemy import Column, String, Integer, DateTime, Text, JSON, Enum, Boolean, Float, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
import uuid
import enum

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())


def _enum_values(enum_cls):
    return [e.value for e in enum_cls]


# Enums
class ApplicationStatus(str, enum.Enum):
    NEW = "new"
    REVIEWING = "reviewing"
    APPROVED = "approved"
    REJECTED = "rejected"

class ProfileRole(str, enum.Enum):
    USER = "user"
    BRAND_ADMIN = "brand_admin"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# Models
class DesignerApplication(Base):
    """A designer's request to have their brand onboarded."""
    __tablename__ = "designer_applications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    brand_name = Column(String(255), nullable=False)
    designer_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50))
    website = Column(String(500))
    instagram = Column(String(255))
    location = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    year_founded = Column(Integer)
    status = Column(
        Enum(ApplicationStatus, values_callable=_enum_values, name="application_status"),
        default=ApplicationStatus.NEW,
        nullable=False,
    )
    notes = Column(Text)
    reviewed_by = Column(String(36))
    reviewed_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_designer_applications_brand_email", "brand_name", "email"),
    )


class Brand(Base):
    __tablename__ = "brands"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    contact_email = Column(String(255))
    description = Column(Text)
    long_description = Column(Text)
    location = Column(String(255))
    category = Column(String(100))
    categories = Column(JSON, default=list)  # Array of category names
    price_range = Column(String(100))
    website = Column(String(500))
    instagram = Column(String(255))
    whatsapp = Column(String(50))
    founded_year = Column(Integer)
    image = Column(String(500))
    is_verified = Column(Boolean, default=False, nullable=False)
    rating = Column(Float, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_brands_name_contact_email", "name", "contact_email"),
    )


class Profile(Base):
    """Marketplace permissions for an auth-provider identity (same id)."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), index=True)
    first_name = Column(String(255))
    role = Column(
        Enum(ProfileRole, values_callable=_enum_values, name="profile_role"),
        default=ProfileRole.USER,
        nullable=False,
    )
    owned_brands = Column(JSON, default=list)  # Array of brand ids, no duplicates
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
