"""Prompt catalogue and record profiles.

A ``RecordProfile`` binds a ServiceNow table to the inbound identifier field,
the prompt used to summarize rows of that table and the shape of the answer.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

PLACEHOLDER = "N/A"


class SummaryMode(str, Enum):
    BRIEF = "brief"
    FREE_TEXT = "free_text"
    STRUCTURED = "structured"


def field_text(record: dict[str, Any], name: str) -> str:
    value = record.get(name)
    if isinstance(value, dict):
        value = value.get("display_value")
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def render_incident(record: dict[str, Any]) -> str:
    return (
        f"Incident number: {field_text(record, 'number')}\n"
        f"Short description: {field_text(record, 'short_description')}\n"
        f"Description: {field_text(record, 'description')}\n"
        f"Priority: {field_text(record, 'priority')}\n"
        f"State: {field_text(record, 'state')}\n"
    )


def render_item(record: dict[str, Any]) -> str:
    return (
        f"Item number: {field_text(record, 'number')}\n"
        f"Short description: {field_text(record, 'short_description')}\n"
        f"Description: {field_text(record, 'description')}\n"
        f"Priority: {field_text(record, 'priority')}\n"
        f"State: {field_text(record, 'state')}\n"
        f"Item: {field_text(record, 'configuration_item')}\n"
        f"Quantity: {field_text(record, 'quantity')}\n"
        f"Linked Request: {field_text(record, 'request')}\n"
        f"Approval Status: {field_text(record, 'approval')}\n"
        f"Price: {field_text(record, 'price')}\n"
        f"Recurring Price: {field_text(record, 'recurring_price')}\n"
        f"Requested for: {field_text(record, 'requested_for')}\n"
    )


def render_brief(record: dict[str, Any], number: str) -> str:
    short_description = field_text(record, "short_description")
    if short_description == PLACEHOLDER:
        short_description = "No description"
    priority = field_text(record, "priority")
    return f"Incident {number}: {short_description} (Priority {priority})"


ITEM_SYSTEM_PROMPT = (
    "You are an HSE assistant summarizing health & safety items for HSE officers."
)
INCIDENT_SYSTEM_PROMPT = (
    "You are an HSE assistant summarizing health & safety incidents for HSE officers."
)

ITEM_INSTRUCTION = (
    "Summarize this item in 5-7 sentences, keeping the important aspects of the item "
    "and suggest a risk level and 3 recommended follow-up actions:\n"
)

INCIDENT_INSTRUCTION = """Please return a JSON object with two fields:

1. "summary_and_risk": Format this as follows:
**Incident Summary:**
[Provide a 5-7 sentence summary of the incident, including number, short description, \
priority, and any relevant context. Make it clear whether the incident poses any health, \
safety, or environmental risks.]

**Risk Level:**
[State the risk level clearly as one of: Low, Medium, High]

2. "followup_actions": Format this as follows:
**Recommended Follow-up Actions:**
1. [First recommended action]
2. [Second recommended action]
3. [Third recommended action]

Here is the incident data:
"""

NARRATIVE_FIELD = "summary_and_risk"
FOLLOW_UP_FIELD = "followup_actions"


@dataclass(frozen=True)
class RecordProfile:
    name: str
    table: str
    identifier_field: str
    mode: SummaryMode
    system_prompt: str = ""
    instruction: str = ""
    renderer: Callable[[dict[str, Any]], str] | None = None

    def build_messages(self, record: dict[str, Any]) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": f"{self.instruction}{self.renderer(record)}"},
        ]


INCIDENT_BRIEF = RecordProfile(
    name="incident_brief",
    table="incident",
    identifier_field="incident_number",
    mode=SummaryMode.BRIEF,
)

REQUEST_ITEM = RecordProfile(
    name="request_item",
    table="sc_req_item",
    identifier_field="item_number",
    mode=SummaryMode.FREE_TEXT,
    system_prompt=ITEM_SYSTEM_PROMPT,
    instruction=ITEM_INSTRUCTION,
    renderer=render_item,
)

INCIDENT = RecordProfile(
    name="incident",
    table="incident",
    identifier_field="incident_number",
    mode=SummaryMode.STRUCTURED,
    system_prompt=INCIDENT_SYSTEM_PROMPT,
    instruction=INCIDENT_INSTRUCTION,
    renderer=render_incident,
)
