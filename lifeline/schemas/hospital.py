from __future__ import annotations

from datetime import time

from pydantic import BaseModel, ConfigDict, model_validator

from lifeline.utils.time import day_name, format_time


class HospitalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: str
    phone: str | None = None
    email: str | None = None
    is_active: bool


class HospitalActivePayload(BaseModel):
    active: bool


class TimeWindowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    hospital_id: str
    day_of_week: int
    start_time: time
    end_time: time
    display: str = ""

    @model_validator(mode="after")
    def _build_display(self) -> "TimeWindowResponse":
        self.display = f"{day_name(self.day_of_week)} {format_time(self.start_time)} - {format_time(self.end_time)}"
        return self


class InventoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hospital_id: str
    blood_type: str
    current_units: int
    capacity: int
    threshold: int


class BloodTypeSummary(BaseModel):
    blood_type: str
    current: int
    needed: int
    hospitals: int
    percentage: int


class InventoryAlert(BaseModel):
    type: str
    blood_type: str
    percentage: int
    message: str
