from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lifeline.utils.time import as_utc


class CompleteDonationPayload(BaseModel):
    # Range is enforced by the service so the error carries the domain message
    units: int


class DonationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    appointment_id: str
    donor_id: str
    hospital_id: str
    blood_type: str
    units: int
    status: str
    donation_date: datetime
    donor_name: str | None = None

    @field_validator("donation_date")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class DonorStatsResponse(BaseModel):
    total_donations: int = 0
    total_units: int = 0
    total_volume_ml: int = 0
    last_donation_date: datetime | None = None
    next_eligible_date: date | None = None
    is_eligible: bool = True
    badge: str = "Bronze Donor"


class DonationRequestPayload(BaseModel):
    blood_type: str
    subject: str = "Blood Donation Request"
    message: str = Field(min_length=1)


class DonationRequestResponse(BaseModel):
    recipients: list[str]
    status: str = "sent"
