from __future__ import annotations

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.orm import Session

from lifeline.api.deps import get_agent_hospital_id, get_current_user, require_roles
from lifeline.core.errors import PermissionDeniedError
from lifeline.models import Role
from lifeline.schemas import (
    AdminStatsResponse,
    AgentAppointmentResponse,
    AgentSummary,
    AppointmentResponse,
    AppointmentStatusPayload,
    AssignAgentPayload,
    AssignmentResponse,
    BloodTypeSummary,
    CompleteDonationPayload,
    CreatedProfilesResponse,
    DonationRequestPayload,
    DonationRequestResponse,
    DonationResponse,
    DonorStatsResponse,
    HospitalActivePayload,
    HospitalResponse,
    InventoryAlert,
    InventoryResponse,
    ScheduleAppointmentPayload,
    TimeWindowResponse,
)
from lifeline.services.appointments import get_appointment_manager
from lifeline.services.assignments import get_assignment_service
from lifeline.services.dashboards import Dashboard, get_dashboard_service
from lifeline.services.db import get_db
from lifeline.services.donations import get_donation_service
from lifeline.services.hospitals import get_hospital_service
from lifeline.services.inventory import get_inventory_service
from lifeline.services.notifications import NotificationService, get_notification_service
from lifeline.services.roles import CurrentUser
from lifeline.services.stats import get_stats_service

router = APIRouter()

donor_only = require_roles(Role.DONOR)
admin_only = require_roles(Role.ADMIN)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/dashboard", response_model=Dashboard)
def dashboard(user: CurrentUser = Depends(get_current_user), session: Session = Depends(get_db)):
    return get_dashboard_service(session).build(user)


# Hospitals and time windows


@router.get("/hospitals", response_model=list[HospitalResponse])
def list_hospitals(_: CurrentUser = Depends(get_current_user), session: Session = Depends(get_db)):
    return get_hospital_service(session).active_hospitals()


@router.get("/hospitals/{hospital_id}/time-windows", response_model=list[TimeWindowResponse])
def list_time_windows(
    hospital_id: str,
    _: CurrentUser = Depends(get_current_user),
    session: Session = Depends(get_db),
):
    return get_hospital_service(session).time_windows(hospital_id=hospital_id)


@router.put("/hospitals/{hospital_id}/active", response_model=HospitalResponse)
def set_hospital_active(
    hospital_id: str,
    payload: HospitalActivePayload,
    user: CurrentUser = Depends(require_roles(Role.AGENT, Role.ADMIN)),
    session: Session = Depends(get_db),
):
    if user.is_agent:
        assignment = get_assignment_service(session).active_assignment(agent_id=user.id)
        if assignment is None or assignment.hospital_id != hospital_id:
            raise PermissionDeniedError("You can only update the hospital you are assigned to")
    # The response carries the stored value for the client to reconcile against
    return get_hospital_service(session).set_active(hospital_id=hospital_id, active=payload.active)


# Donor


@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def schedule_appointment(
    payload: ScheduleAppointmentPayload,
    user: CurrentUser = Depends(donor_only),
    session: Session = Depends(get_db),
):
    appointment = get_appointment_manager(session).schedule(
        donor_id=user.id,
        hospital_id=payload.hospital_id,
        time_window_id=payload.time_window_id,
        notes=payload.notes,
    )
    return appointment


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    user: CurrentUser = Depends(donor_only),
    session: Session = Depends(get_db),
):
    return get_appointment_manager(session).cancel(appointment_id=appointment_id, donor_id=user.id)


@router.get("/me/appointments/upcoming", response_model=AppointmentResponse | None)
def my_upcoming_appointment(user: CurrentUser = Depends(donor_only), session: Session = Depends(get_db)):
    return get_appointment_manager(session).upcoming_for_donor(donor_id=user.id)


@router.get("/me/appointments/history", response_model=list[AppointmentResponse])
def my_previous_appointments(user: CurrentUser = Depends(donor_only), session: Session = Depends(get_db)):
    return get_appointment_manager(session).previous_for_donor(donor_id=user.id)


@router.get("/me/donation-stats", response_model=DonorStatsResponse)
def my_donation_stats(user: CurrentUser = Depends(donor_only), session: Session = Depends(get_db)):
    return get_stats_service(session).donor_stats(donor_id=user.id)


# Agent


@router.get("/agent/appointments", response_model=list[AgentAppointmentResponse])
def agent_appointments(hospital_id: str = Depends(get_agent_hospital_id), session: Session = Depends(get_db)):
    return get_appointment_manager(session).for_hospital(hospital_id=hospital_id)


@router.post("/agent/appointments/{appointment_id}/complete", response_model=DonationResponse)
def complete_donation(
    appointment_id: str,
    payload: CompleteDonationPayload,
    hospital_id: str = Depends(get_agent_hospital_id),
    session: Session = Depends(get_db),
):
    return get_appointment_manager(session).complete_donation(
        appointment_id=appointment_id,
        units=payload.units,
        hospital_id=hospital_id,
    )


@router.patch("/agent/appointments/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: str,
    payload: AppointmentStatusPayload,
    hospital_id: str = Depends(get_agent_hospital_id),
    session: Session = Depends(get_db),
):
    return get_appointment_manager(session).set_status(
        appointment_id=appointment_id,
        status=payload.status,
        hospital_id=hospital_id,
    )


@router.get("/agent/inventory", response_model=list[InventoryResponse])
def agent_inventory(hospital_id: str = Depends(get_agent_hospital_id), session: Session = Depends(get_db)):
    return get_inventory_service(session).for_hospital(hospital_id=hospital_id)


@router.get("/agent/donations", response_model=list[DonationResponse])
def agent_donations(
    blood_type: str,
    hospital_id: str = Depends(get_agent_hospital_id),
    session: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    return get_donation_service(session, notifications).for_blood_type(hospital_id=hospital_id, blood_type=blood_type)


@router.post("/agent/donation-requests", response_model=DonationRequestResponse)
def request_donations(
    payload: DonationRequestPayload,
    hospital_id: str = Depends(get_agent_hospital_id),
    session: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    recipients = get_donation_service(session, notifications).request_donations(
        hospital_id=hospital_id,
        blood_type=payload.blood_type,
        subject=payload.subject,
        message=payload.message,
    )
    return DonationRequestResponse(recipients=recipients)


# Admin


@router.get("/admin/stats", response_model=AdminStatsResponse)
def admin_stats(_: CurrentUser = Depends(admin_only), session: Session = Depends(get_db)):
    return get_stats_service(session).admin_stats()


@router.get("/admin/inventory", response_model=list[BloodTypeSummary])
def admin_inventory(_: CurrentUser = Depends(admin_only), session: Session = Depends(get_db)):
    return get_inventory_service(session).by_blood_type()


@router.get("/admin/alerts", response_model=list[InventoryAlert])
def admin_alerts(_: CurrentUser = Depends(admin_only), session: Session = Depends(get_db)):
    return get_inventory_service(session).alerts()


@router.get("/admin/appointments/upcoming", response_model=list[AppointmentResponse])
def admin_upcoming_appointments(_: CurrentUser = Depends(admin_only), session: Session = Depends(get_db)):
    return get_appointment_manager(session).upcoming_scheduled()


@router.get("/admin/agents", response_model=list[AgentSummary])
def list_agents(unassigned: bool = False, _: CurrentUser = Depends(admin_only), session: Session = Depends(get_db)):
    service = get_assignment_service(session)
    return service.unassigned_agents() if unassigned else service.agents()


@router.post("/admin/agents/profiles", response_model=CreatedProfilesResponse)
def create_agent_profiles(_: CurrentUser = Depends(admin_only), session: Session = Depends(get_db)):
    return CreatedProfilesResponse(created=get_assignment_service(session).create_missing_agent_profiles())


@router.post("/admin/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def assign_agent(
    payload: AssignAgentPayload,
    user: CurrentUser = Depends(admin_only),
    session: Session = Depends(get_db),
):
    assignment = get_assignment_service(session).assign_agent(
        agent_id=payload.agent_id,
        hospital_id=payload.hospital_id,
    )
    logger.debug("Assignment {assignment_id} created by admin={admin_id}", assignment_id=assignment.id, admin_id=user.id)
    return assignment
