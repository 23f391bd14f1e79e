from pydantic import BaseModel, Field


class StructuredSummary(BaseModel):
    narrative: str
    follow_up_actions: str


class BriefSummaryResponse(BaseModel):
    summary: str


class ItemSummaryResponse(BaseModel):
    item_number: str
    summary: str


class IncidentSummaryResponse(BaseModel):
    incident_number: str
    summary: str = Field(..., description="Incident narrative including the assessed risk level.")
    follow_up: str = Field(..., description="Recommended follow-up actions.")
