import logging
from typing import Any

from pydantic import BaseModel

from hse_bridge.clients.completion_client import CompletionClient
from hse_bridge.clients.servicenow_client import ServiceNowClient
from hse_bridge.contracts.summary import (
    BriefSummaryResponse,
    IncidentSummaryResponse,
    ItemSummaryResponse,
    StructuredSummary,
)
from hse_bridge.exceptions import BridgeError, ValidationError
from hse_bridge.services.prompts import (
    INCIDENT,
    INCIDENT_BRIEF,
    REQUEST_ITEM,
    RecordProfile,
    SummaryMode,
    render_brief,
)

logger = logging.getLogger(__name__)


class SummaryService:
    """Runs the lookup, summarize, reshape pipeline for one inbound request."""

    def __init__(
        self,
        servicenow_client: ServiceNowClient,
        completion_client: CompletionClient,
    ):
        self._servicenow_client = servicenow_client
        self._completion_client = completion_client

    async def summarize_incident_brief(
        self, payload: dict[str, Any], correlation_id: str
    ) -> BriefSummaryResponse:
        return await self._run(INCIDENT_BRIEF, payload, correlation_id)

    async def summarize_item(
        self, payload: dict[str, Any], correlation_id: str
    ) -> ItemSummaryResponse:
        return await self._run(REQUEST_ITEM, payload, correlation_id)

    async def summarize_incident(
        self, payload: dict[str, Any], correlation_id: str
    ) -> IncidentSummaryResponse:
        return await self._run(INCIDENT, payload, correlation_id)

    async def _run(
        self,
        profile: RecordProfile,
        payload: dict[str, Any],
        correlation_id: str,
    ) -> Any:
        number = self._identifier(profile, payload)
        logger.info("Request for %s: %s", profile.identifier_field, number)
        try:
            record = await self._servicenow_client.fetch_record(
                table=profile.table, number=number, correlation_id=correlation_id
            )
            if profile.mode is SummaryMode.BRIEF:
                summary: str | StructuredSummary = render_brief(record, number)
            else:
                summary = await self._completion_client.summarize(
                    record=record, profile=profile, correlation_id=correlation_id
                )
        except BridgeError as exc:
            logger.warning(
                "%s pipeline failed for %s with %s: %s",
                profile.name,
                number,
                exc.status_code,
                exc.message,
            )
            raise
        return self._respond(profile, number, summary)

    def _identifier(self, profile: RecordProfile, payload: dict[str, Any]) -> str:
        value = payload.get(profile.identifier_field)
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{profile.identifier_field} is required")
        if "^" in value:
            raise ValidationError(f"{profile.identifier_field} must not contain query operators")
        return value.strip()

    def _respond(
        self,
        profile: RecordProfile,
        number: str,
        summary: str | StructuredSummary,
    ) -> BaseModel:
        if isinstance(summary, StructuredSummary):
            return IncidentSummaryResponse(
                incident_number=number,
                summary=summary.narrative,
                follow_up=summary.follow_up_actions,
            )
        if profile.mode is SummaryMode.FREE_TEXT:
            return ItemSummaryResponse(item_number=number, summary=summary)
        return BriefSummaryResponse(summary=summary)
