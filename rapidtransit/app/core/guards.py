"""
Security guards for role-based and ownership-based access control.

Provides dependencies for protecting endpoints.
"""

from typing import List
from fastapi import Depends, HTTPException, status
from rapidtransit.app.models.enums import UserRole
from rapidtransit.app.core.dependencies import get_current_user

# Roles that manage parcels on behalf of every customer
STAFF_ROLES = [UserRole.OPERATOR, UserRole.ADMIN]


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.patch("/parcels/{parcel_id}/status")
        async def update_status(current_user: dict = Depends(require_role(STAFF_ROLES))):
            ...

    Raises:
        HTTPException 403 if user role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        user_role_str = current_user.get("role")

        if not user_role_str:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Role information missing from token"
            )

        try:
            user_role = UserRole(user_role_str)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid role in token"
            )

        if user_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )

        return current_user

    return role_checker


def verify_ownership(resource_owner_id: int, current_user: dict) -> bool:
    """
    Verify that the current user owns the resource.

    Operators and admins can access every parcel; customers only their own.
    """
    if current_user.get("role") in [r.value for r in STAFF_ROLES]:
        return True

    return current_user.get("user_id") == resource_owner_id


class OwnershipGuard:
    """
    Class-based ownership guard.

    Usage:
        ownership_guard = OwnershipGuard()
        parcel = await ParcelStore.get_parcel(db, parcel_id)
        ownership_guard.enforce(parcel.sender_id, current_user, "parcel")
    """

    def enforce(
        self,
        resource_owner_id: int,
        current_user: dict,
        resource_name: str = "resource"
    ):
        """
        Enforce ownership validation, raise 403 if access denied.
        """
        if not verify_ownership(resource_owner_id, current_user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. You do not have permission to access this {resource_name}."
            )
