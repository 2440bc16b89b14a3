from .appointment import (
    AgentAppointmentResponse,
    AppointmentResponse,
    AppointmentStatusPayload,
    ScheduleAppointmentPayload,
)
from .assignment import AgentSummary, AssignAgentPayload, AssignmentResponse, CreatedProfilesResponse
from .dashboard import AdminDashboard, AdminStatsResponse, AgentDashboard, DonorDashboard
from .donation import (
    CompleteDonationPayload,
    DonationRequestPayload,
    DonationRequestResponse,
    DonationResponse,
    DonorStatsResponse,
)
from .hospital import (
    BloodTypeSummary,
    HospitalActivePayload,
    HospitalResponse,
    InventoryAlert,
    InventoryResponse,
    TimeWindowResponse,
)

__all__ = [
    "AgentAppointmentResponse",
    "AppointmentResponse",
    "AppointmentStatusPayload",
    "ScheduleAppointmentPayload",
    "AgentSummary",
    "AssignAgentPayload",
    "AssignmentResponse",
    "CreatedProfilesResponse",
    "AdminDashboard",
    "AdminStatsResponse",
    "AgentDashboard",
    "DonorDashboard",
    "CompleteDonationPayload",
    "DonationRequestPayload",
    "DonationRequestResponse",
    "DonationResponse",
    "DonorStatsResponse",
    "BloodTypeSummary",
    "HospitalActivePayload",
    "HospitalResponse",
    "InventoryAlert",
    "InventoryResponse",
    "TimeWindowResponse",
]
