from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from lifeline.core.config import get_settings
from lifeline.core.errors import AuthenticationError, PermissionDeniedError
from lifeline.models import Role
from lifeline.services.assignments import get_assignment_service
from lifeline.services.db import get_db
from lifeline.services.roles import CurrentUser, RoleService


def _authorize(token: str | None) -> None:
    settings = get_settings()
    expected = settings.api_token
    if expected and token != expected:
        raise AuthenticationError("Invalid API token")


def get_current_user(
    session: Session = Depends(get_db),
    x_user_id: str | None = Header(default=None, alias="x-user-id"),
    x_api_token: str | None = Header(default=None, alias="x-api-token"),
) -> CurrentUser:
    """Identity comes from the upstream gateway; the role is looked up once per request."""
    _authorize(x_api_token)
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Missing user id")
    return RoleService(session=session).resolve(user_id=x_user_id.strip())


def require_roles(*roles: Role) -> Callable[[CurrentUser], CurrentUser]:
    allowed = set(roles)

    def _dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise PermissionDeniedError(f"This action requires role: {', '.join(sorted(r.value for r in allowed))}")
        return user

    return _dependency


def get_agent_hospital_id(
    user: CurrentUser = Depends(require_roles(Role.AGENT)),
    session: Session = Depends(get_db),
) -> str:
    assignment = get_assignment_service(session).active_assignment(agent_id=user.id)
    if assignment is None:
        raise PermissionDeniedError("You are not assigned to a hospital")
    return assignment.hospital_id
