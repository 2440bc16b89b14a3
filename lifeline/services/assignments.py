from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lifeline.core.errors import ConflictError, DependencyError, ValidationError
from lifeline.models import DonorProfile, Hospital, HospitalAssignment, Role
from lifeline.schemas import AgentSummary
from lifeline.services.hospitals import HospitalService
from lifeline.services.roles import RoleService

ALREADY_ASSIGNED = "This user is already assigned to a hospital."


class AssignmentService:
    def __init__(self, *, hospital_service: HospitalService, role_service: RoleService, session: Session) -> None:
        self.hospital_service = hospital_service
        self.role_service = role_service
        self.session = session

    def active_assignment(self, *, agent_id: str) -> HospitalAssignment | None:
        stmt = select(HospitalAssignment).where(
            HospitalAssignment.agent_id == agent_id,
            HospitalAssignment.is_active.is_(True),
        )
        return self.session.scalars(stmt).first()

    def assign_agent(self, *, agent_id: str | None, hospital_id: str | None) -> HospitalAssignment:
        if not agent_id or not hospital_id:
            raise ValidationError("Please select both an agent and a hospital.")

        self.hospital_service.get_hospital(hospital_id=hospital_id)
        if self.role_service.get_role(user_id=agent_id) is not Role.AGENT:
            raise ValidationError(f"User {agent_id} is not an agent")

        if self.active_assignment(agent_id=agent_id):
            logger.warning("Agent {agent_id} already has an active assignment", agent_id=agent_id)
            raise ConflictError(ALREADY_ASSIGNED)

        assignment = HospitalAssignment(agent_id=agent_id, hospital_id=hospital_id, is_active=True)
        try:
            with self.session.begin_nested():
                self.session.add(assignment)
                self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(ALREADY_ASSIGNED) from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to assign agent {agent_id}", agent_id=agent_id)
            raise DependencyError("Failed to assign agent.") from exc

        logger.info("Assigned agent {agent_id} to hospital {hospital_id}", agent_id=agent_id, hospital_id=hospital_id)
        return assignment

    def agents(self) -> list[AgentSummary]:
        agent_ids = self.role_service.users_with_role(role=Role.AGENT)
        if not agent_ids:
            return []

        profiles = {
            profile.id: profile
            for profile in self.session.scalars(select(DonorProfile).where(DonorProfile.id.in_(agent_ids)))
        }
        stmt = (
            select(HospitalAssignment.agent_id, Hospital.id, Hospital.name)
            .join(Hospital, Hospital.id == HospitalAssignment.hospital_id)
            .where(HospitalAssignment.agent_id.in_(agent_ids), HospitalAssignment.is_active.is_(True))
        )
        assignments = {agent_id: (hospital_id, name) for agent_id, hospital_id, name in self.session.execute(stmt)}

        summaries: list[AgentSummary] = []
        for agent_id in agent_ids:
            profile = profiles.get(agent_id)
            hospital_id, hospital_name = assignments.get(agent_id, (None, None))
            summaries.append(
                AgentSummary(
                    user_id=agent_id,
                    first_name=profile.first_name if profile else None,
                    last_name=profile.last_name if profile else None,
                    hospital_id=hospital_id,
                    hospital_name=hospital_name,
                )
            )
        return summaries

    def unassigned_agents(self) -> list[AgentSummary]:
        return [agent for agent in self.agents() if agent.hospital_id is None]

    def create_missing_agent_profiles(self) -> list[str]:
        """Give every agent user without a profile a placeholder one they can edit later."""
        agent_ids = self.role_service.users_with_role(role=Role.AGENT)
        existing = set(self.session.scalars(select(DonorProfile.id).where(DonorProfile.id.in_(agent_ids))))
        missing = [agent_id for agent_id in agent_ids if agent_id not in existing]
        for index, agent_id in enumerate(missing, start=1):
            self.session.add(DonorProfile(id=agent_id, first_name="Agent", last_name=f"User {index}"))
        if missing:
            self.session.flush()
            logger.info("Created {count} placeholder agent profile(s)", count=len(missing))
        return missing


def get_assignment_service(session: Session) -> AssignmentService:
    return AssignmentService(
        hospital_service=HospitalService(session=session),
        role_service=RoleService(session=session),
        session=session,
    )
