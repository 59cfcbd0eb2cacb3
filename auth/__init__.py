# Auth module for the OmaHub Studio
# Provides role-based access control and authentication dependencies

from auth.roles import (
    Permission,
    ROLE_PERMISSIONS,
    ELEVATED_ROLES,
    get_permissions_for_role,
    has_any_permission,
)

from auth.decorators import (
    AuthError,
    require_permission,
)

from auth.dependencies import get_current_profile

__all__ = [
    # Roles
    "Permission",
    "ROLE_PERMISSIONS",
    "ELEVATED_ROLES",
    "get_permissions_for_role",
    "has_any_permission",

    # Dependencies
    "AuthError",
    "require_permission",
    "get_current_profile",
]
