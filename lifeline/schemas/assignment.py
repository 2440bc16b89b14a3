from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AssignAgentPayload(BaseModel):
    agent_id: str | None = None
    hospital_id: str | None = None


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    agent_id: str
    hospital_id: str
    is_active: bool


class AgentSummary(BaseModel):
    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    hospital_id: str | None = None
    hospital_name: str | None = None


class CreatedProfilesResponse(BaseModel):
    created: list[str]
