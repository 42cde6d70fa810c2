# planning/core/rbac.py
from fastapi import Depends, HTTPException, status
from planning.api.deps import get_current_user
from planning.models.user import User, UserRole

ROLE_ADMIN = UserRole.administrateur.value

def require_roles(*roles: str):
    """Use: dependencies=[Depends(require_roles(ROLE_ADMIN))]"""
    allowed = set(roles)
    def dep(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Vous n'avez pas la permission d'effectuer cette action",
            )
        return user
    return dep

require_admin = require_roles(ROLE_ADMIN)
