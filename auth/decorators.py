# Authorization Dependencies for the OmaHub Studio
# These dependencies provide easy-to-use access control for API endpoints

from fastapi import HTTPException, status, Depends

from database.models import Profile, ProfileRole
from auth.roles import Permission, has_any_permission
from auth.dependencies import get_current_profile


class AuthError(HTTPException):
    """Custom exception for authentication/authorization errors."""

    def __init__(self, detail: str, status_code: int = status.HTTP_403_FORBIDDEN):
        super().__init__(status_code=status_code, detail=detail)


def require_permission(*permissions: Permission):
    """
    Dependency that requires the caller to have any of the given permissions.

    Usage:
        @router.put("/{application_id}")
        async def update_application(
            profile: Profile = Depends(require_permission(Permission.REVIEW_APPLICATIONS))
        ):
            ...
    """
    async def dependency(current_profile: Profile = Depends(get_current_profile)) -> Profile:
        if not has_any_permission(_get_role(current_profile), list(permissions)):
            raise AuthError(detail="You don't have permission to perform this action")

        return current_profile

    return dependency


def _get_role(profile: Profile) -> ProfileRole:
    """Extract the ProfileRole, tolerating raw string values from the database."""
    role = profile.role
    if isinstance(role, ProfileRole):
        return role
    try:
        return ProfileRole(str(role).lower())
    except ValueError:
        return ProfileRole.USER
