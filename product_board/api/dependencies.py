"""Session role resolution for API requests."""

from typing import Optional
from fastapi import Depends, HTTPException, Request, Response

from ..config import auth_config
from ..models import Role, parse_role


def resolve_login(password: str) -> Optional[Role]:
    """Decide the role for a login password, or None when it matches neither."""
    if password == auth_config.admin_password:
        return Role.ADMIN
    if password == auth_config.login_password:
        return Role.USER
    return None


def set_session_cookie(response: Response, role: Role) -> None:
    response.set_cookie(
        auth_config.session_cookie,
        role.value,
        max_age=auth_config.session_max_age,
        httponly=True,
        secure=auth_config.secure_cookie,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(auth_config.session_cookie, path="/")


def get_request_role(request: Request) -> Optional[Role]:
    """Role carried by the request's session cookie, if any."""
    return parse_role(request.cookies.get(auth_config.session_cookie))


def require_session(role: Optional[Role] = Depends(get_request_role)) -> Role:
    """Dependency: any logged-in role."""
    if role is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return role


def require_admin(role: Role = Depends(require_session)) -> Role:
    """Dependency: admin role only."""
    if role is not Role.ADMIN:
        raise HTTPException(status_code=403, detail="Forbidden")
    return role
