# app/core/rbac.py

from fastapi import Depends, HTTPException, status

from app.api.deps import get_current_principal
from app.core.permissions import PermissionQuery, has_permission
from app.schemas.auth import Principal


def require_permission(*queries: PermissionQuery):
    """
    Route guard over the permission evaluator.
    - Accepts capability tags and/or roles (any-match)
    - Roles mean "at least this senior"
    """

    async def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_permission(principal, queries):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role '{principal.role.value}'"
            )
        return principal

    return checker
