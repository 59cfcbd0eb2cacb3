# Role-Based Access Control for the OmaHub Studio
# Maps profile roles to the studio permissions they grant

from enum import Enum
from typing import List, Set

from database.models import ProfileRole


class Permission(str, Enum):
    """Permissions guarding the application review endpoints."""

    REVIEW_APPLICATIONS = "review_applications"
    DELETE_APPLICATIONS = "delete_applications"


# Role to permissions mapping
ROLE_PERMISSIONS: dict[ProfileRole, Set[Permission]] = {
    ProfileRole.USER: set(),
    ProfileRole.BRAND_ADMIN: set(),
    ProfileRole.ADMIN: set(),
    # Super admin has ALL permissions
    ProfileRole.SUPER_ADMIN: {*Permission.__members__.values()},
}

# Roles that outrank brand_admin; approval never downgrades them
ELEVATED_ROLES = {ProfileRole.ADMIN, ProfileRole.SUPER_ADMIN}


def get_permissions_for_role(role: ProfileRole) -> Set[Permission]:
    """Get all permissions for a given role."""
    return ROLE_PERMISSIONS.get(role, set())


def has_any_permission(role: ProfileRole, permissions: List[Permission]) -> bool:
    """Check if a role has any of the given permissions."""
    role_permissions = get_permissions_for_role(role)
    return any(p in role_permissions for p in permissions)
