from __future__ import annotations

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from lifeline.models import Role, RoleAssignment


class CurrentUser(BaseModel):
    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role is Role.AGENT

    @property
    def is_donor(self) -> bool:
        return self.role is Role.DONOR


class RoleService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_role(self, *, user_id: str) -> Role:
        stmt = select(RoleAssignment.role).where(RoleAssignment.user_id == user_id)
        role = self.session.scalars(stmt).first()
        if role is None:
            logger.debug("No role row for user={user_id}; treating as donor", user_id=user_id)
            return Role.DONOR
        return role

    def resolve(self, *, user_id: str) -> CurrentUser:
        return CurrentUser(id=user_id, role=self.get_role(user_id=user_id))

    def users_with_role(self, *, role: Role) -> list[str]:
        stmt = select(RoleAssignment.user_id).where(RoleAssignment.role == role).order_by(RoleAssignment.user_id)
        return list(self.session.scalars(stmt))


def get_role_service(session: Session) -> RoleService:
    return RoleService(session=session)
