from __future__ import annotations

from typing import Annotated, Callable, Union

from pydantic import Field
from sqlalchemy.orm import Session

from lifeline.models import Role
from lifeline.schemas import AdminDashboard, AgentDashboard, DonorDashboard, HospitalResponse, InventoryResponse
from lifeline.services.appointments import AppointmentManager, get_appointment_manager
from lifeline.services.assignments import AssignmentService, get_assignment_service
from lifeline.services.inventory import InventoryService
from lifeline.services.roles import CurrentUser
from lifeline.services.stats import StatsService

Dashboard = Annotated[Union[DonorDashboard, AgentDashboard, AdminDashboard], Field(discriminator="role")]


class DashboardService:
    """Builds the one view that matches the caller's role."""

    def __init__(
        self,
        *,
        appointment_manager: AppointmentManager,
        assignment_service: AssignmentService,
        stats_service: StatsService,
        session: Session,
    ) -> None:
        self.appointment_manager = appointment_manager
        self.assignment_service = assignment_service
        self.stats_service = stats_service
        self.inventory_service: InventoryService = appointment_manager.inventory_service
        self.session = session
        self._views: dict[Role, Callable[[str], Dashboard]] = {
            Role.DONOR: self.donor_view,
            Role.AGENT: self.agent_view,
            Role.ADMIN: self.admin_view,
        }

    def build(self, user: CurrentUser) -> Dashboard:
        return self._views[user.role](user.id)

    def donor_view(self, user_id: str) -> DonorDashboard:
        return DonorDashboard(
            upcoming_appointment=self.appointment_manager.upcoming_for_donor(donor_id=user_id),
            previous_appointments=self.appointment_manager.previous_for_donor(donor_id=user_id),
            stats=self.stats_service.donor_stats(donor_id=user_id),
        )

    def agent_view(self, user_id: str) -> AgentDashboard:
        assignment = self.assignment_service.active_assignment(agent_id=user_id)
        if assignment is None:
            return AgentDashboard()

        hospital = self.appointment_manager.hospital_service.get_hospital(hospital_id=assignment.hospital_id)
        return AgentDashboard(
            hospital=HospitalResponse.model_validate(hospital),
            inventory=[
                InventoryResponse.model_validate(counter)
                for counter in self.inventory_service.for_hospital(hospital_id=hospital.id)
            ],
            appointments=self.appointment_manager.for_hospital(hospital_id=hospital.id),
        )

    def admin_view(self, user_id: str) -> AdminDashboard:
        inventory = self.inventory_service.by_blood_type()
        return AdminDashboard(
            stats=self.stats_service.admin_stats(),
            inventory=inventory,
            alerts=self.inventory_service.alerts(inventory),
            upcoming_appointments=self.appointment_manager.upcoming_scheduled(),
        )


def get_dashboard_service(session: Session) -> DashboardService:
    return DashboardService(
        appointment_manager=get_appointment_manager(session),
        assignment_service=get_assignment_service(session),
        stats_service=StatsService(session=session),
        session=session,
    )
