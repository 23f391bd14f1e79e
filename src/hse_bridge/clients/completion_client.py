import json
import logging
import re
from typing import Any

import httpx

from hse_bridge.contracts.summary import StructuredSummary
from hse_bridge.exceptions import MalformedModelOutputError, SummarizationApiError
from hse_bridge.middleware.correlation import propagation_headers
from hse_bridge.services.prompts import (
    FOLLOW_UP_FIELD,
    NARRATIVE_FIELD,
    RecordProfile,
    SummaryMode,
)

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_structured_content(content: str) -> StructuredSummary:
    text = content.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedModelOutputError(str(exc)) from exc
    if not isinstance(parsed, dict):
        raise MalformedModelOutputError(f"expected a JSON object, got {type(parsed).__name__}")
    missing = [key for key in (NARRATIVE_FIELD, FOLLOW_UP_FIELD) if key not in parsed]
    if missing:
        raise MalformedModelOutputError(f"missing fields: {', '.join(missing)}")
    return StructuredSummary(
        narrative=_as_text(NARRATIVE_FIELD, parsed[NARRATIVE_FIELD]),
        follow_up_actions=_as_text(FOLLOW_UP_FIELD, parsed[FOLLOW_UP_FIELD]),
    )


def _as_text(name: str, value: Any) -> str:
    if isinstance(value, list):
        value = "\n".join(str(entry) for entry in value if entry is not None)
    if not isinstance(value, str):
        raise MalformedModelOutputError(f"{name} must be text, got {type(value).__name__}")
    if not value.strip():
        raise MalformedModelOutputError(f"{name} is empty")
    return value


class CompletionClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        temperature: float,
        timeout_seconds: float,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._timeout = timeout_seconds

    async def summarize(
        self,
        record: dict[str, Any],
        profile: RecordProfile,
        correlation_id: str = "",
    ) -> str | StructuredSummary:
        content = await self.complete(profile.build_messages(record), correlation_id)
        if profile.mode is SummaryMode.STRUCTURED:
            return parse_structured_content(content)
        return content

    async def complete(self, messages: list[dict[str, str]], correlation_id: str = "") -> str:
        url = f"{self._base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            **propagation_headers(correlation_id),
        }
        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise SummarizationApiError(504, f"timed out: {exc.__class__.__name__}") from exc
        except httpx.HTTPError as exc:
            raise SummarizationApiError(502, f"unreachable: {exc.__class__.__name__}") from exc

        logger.info("OpenAI status: %s", response.status_code)
        if not response.is_success:
            raise SummarizationApiError(response.status_code, response.text)
        return self._message_content(response)

    def _message_content(self, response: httpx.Response) -> str:
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise SummarizationApiError(502, f"unreadable completion envelope: {exc!r}") from exc
        if not isinstance(content, str):
            raise SummarizationApiError(502, "completion message has no text content")
        return content
