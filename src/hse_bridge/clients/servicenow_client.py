import base64
import logging
from typing import Any

import httpx

from hse_bridge.exceptions import RecordNotFoundError, VendorApiError
from hse_bridge.middleware.correlation import propagation_headers

logger = logging.getLogger(__name__)


class ServiceNowClient:
    def __init__(self, base_url: str, username: str, password: str, timeout_seconds: float):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        self._authorization = f"Basic {token}"

    async def fetch_record(
        self,
        table: str,
        number: str,
        correlation_id: str = "",
    ) -> dict[str, Any]:
        url = f"{self._base_url}/api/now/table/{table}"
        params = {
            "sysparm_query": f"number={number}",
            "sysparm_limit": "1",
            "sysparm_display_value": "true",
        }
        headers = {
            "Accept": "application/json",
            "Authorization": self._authorization,
            **propagation_headers(correlation_id),
        }
        logger.info("Calling ServiceNow table %s for %s", table, number)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            raise VendorApiError(504, f"ServiceNow timed out: {exc.__class__.__name__}") from exc
        except httpx.HTTPError as exc:
            raise VendorApiError(502, f"ServiceNow unreachable: {exc.__class__.__name__}") from exc

        logger.info("ServiceNow status: %s", response.status_code)
        if not response.is_success:
            raise VendorApiError(response.status_code, response.text)

        payload = self._response_payload(response)
        rows = payload.get("result")
        if rows is not None and not isinstance(rows, list):
            raise VendorApiError(502, f"unexpected result type: {type(rows).__name__}")
        if not rows:
            raise RecordNotFoundError(f"{number} not found in ServiceNow table {table}")
        if not isinstance(rows[0], dict):
            raise VendorApiError(502, f"unexpected row type: {type(rows[0]).__name__}")
        return rows[0]

    def _response_payload(self, response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise VendorApiError(502, f"invalid JSON body: {response.text[:200]}") from exc
        if isinstance(payload, dict):
            return payload
        raise VendorApiError(502, f"unexpected payload type: {type(payload).__name__}")
