from typing import Any

from fastapi import APIRouter, Body

from hse_bridge.clients.completion_client import CompletionClient
from hse_bridge.clients.servicenow_client import ServiceNowClient
from hse_bridge.config import settings
from hse_bridge.contracts.errors import ErrorResponse
from hse_bridge.contracts.summary import (
    BriefSummaryResponse,
    IncidentSummaryResponse,
    ItemSummaryResponse,
)
from hse_bridge.middleware.correlation import correlation_id_var
from hse_bridge.services.summary_service import SummaryService

router = APIRouter(tags=["hse-summary"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Identifier missing or body malformed."},
    404: {"model": ErrorResponse, "description": "Record not found in ServiceNow."},
    500: {"model": ErrorResponse, "description": "Summarization failed."},
}


def _summary_service() -> SummaryService:
    return SummaryService(
        servicenow_client=ServiceNowClient(
            base_url=settings.sn_instance,
            username=settings.sn_username,
            password=settings.sn_password,
            timeout_seconds=settings.upstream_timeout_seconds,
        ),
        completion_client=CompletionClient(
            base_url=settings.openai_base_url,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            timeout_seconds=settings.upstream_timeout_seconds,
        ),
    )


@router.post(
    "/hse-summary",
    response_model=BriefSummaryResponse,
    responses=_ERROR_RESPONSES,
    summary="Brief Incident Summary",
    description="Looks up an incident and renders a one-line summary without a model call.",
)
async def hse_summary(payload: dict[str, Any] | None = Body(default=None)) -> BriefSummaryResponse:
    service = _summary_service()
    return await service.summarize_incident_brief(
        payload=payload or {}, correlation_id=correlation_id_var.get()
    )


@router.post(
    "/hse-summary-item",
    response_model=ItemSummaryResponse,
    responses=_ERROR_RESPONSES,
    summary="Request Item Summary",
    description="Looks up a request item and returns the model's free-text HSE summary.",
)
async def hse_summary_item(
    payload: dict[str, Any] | None = Body(default=None),
) -> ItemSummaryResponse:
    service = _summary_service()
    return await service.summarize_item(
        payload=payload or {}, correlation_id=correlation_id_var.get()
    )


@router.post(
    "/hse-summary-incident",
    response_model=IncidentSummaryResponse,
    responses=_ERROR_RESPONSES,
    summary="Structured Incident Summary",
    description=(
        "Looks up an incident and returns the model's narrative with risk level "
        "and its recommended follow-up actions."
    ),
)
async def hse_summary_incident(
    payload: dict[str, Any] | None = Body(default=None),
) -> IncidentSummaryResponse:
    service = _summary_service()
    return await service.summarize_incident(
        payload=payload or {}, correlation_id=correlation_id_var.get()
    )
