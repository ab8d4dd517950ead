from fastapi import Depends, HTTPException, status

from .security import get_current_user

ADMIN = "admin"


def is_admin(user: dict) -> bool:
    return user.get("role") == ADMIN


def require_role(user: dict, allowed_roles: list[str]):
    role = user.get("role")

    if not role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Role missing in token",
        )

    if role not in {r.lower() for r in allowed_roles}:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access forbidden for this role",
        )


def get_admin_user(user: dict = Depends(get_current_user)) -> dict:
    require_role(user, [ADMIN])
    return user
