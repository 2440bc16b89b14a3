from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from lifeline.utils.time import as_utc


class ScheduleAppointmentPayload(BaseModel):
    hospital_id: str | None = None
    time_window_id: str | None = None
    notes: str | None = None

    @field_validator("hospital_id", "time_window_id", "notes")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class AppointmentStatusPayload(BaseModel):
    # "completed" is accepted here only so the service can point callers at /complete
    status: Literal["cancelled", "no_show", "completed"]


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    donor_id: str
    hospital_id: str
    blood_type: str
    scheduled_at: datetime
    status: str
    notes: str | None = None
    hospital_name: str | None = None

    @field_validator("scheduled_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class AgentAppointmentResponse(AppointmentResponse):
    donor_first_name: str = "Unknown"
    donor_last_name: str = "Donor"
    donor_phone: str | None = None
