from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .appointment import AgentAppointmentResponse, AppointmentResponse
from .donation import DonorStatsResponse
from .hospital import BloodTypeSummary, HospitalResponse, InventoryAlert, InventoryResponse


class AdminStatsResponse(BaseModel):
    total_donors: int = 0
    active_donors: int = 0
    total_donations: int = 0
    monthly_donations: int = 0


class DonorDashboard(BaseModel):
    role: Literal["donor"] = "donor"
    upcoming_appointment: AppointmentResponse | None = None
    previous_appointments: list[AppointmentResponse] = Field(default_factory=list)
    stats: DonorStatsResponse


class AgentDashboard(BaseModel):
    role: Literal["agent"] = "agent"
    hospital: HospitalResponse | None = None
    inventory: list[InventoryResponse] = Field(default_factory=list)
    appointments: list[AgentAppointmentResponse] = Field(default_factory=list)


class AdminDashboard(BaseModel):
    role: Literal["admin"] = "admin"
    stats: AdminStatsResponse
    inventory: list[BloodTypeSummary] = Field(default_factory=list)
    alerts: list[InventoryAlert] = Field(default_factory=list)
    upcoming_appointments: list[AppointmentResponse] = Field(default_factory=list)
