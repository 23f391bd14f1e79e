from fastapi.testclient import TestClient

from hse_bridge.contracts.errors import ErrorResponse
from hse_bridge.contracts.summary import IncidentSummaryResponse, ItemSummaryResponse
from hse_bridge.main import app


def test_summary_response_model_contract_shape() -> None:
    item = ItemSummaryResponse(item_number="RITM0010001", summary="text")
    incident = IncidentSummaryResponse(
        incident_number="INC0001234", summary="narrative", follow_up="1. act"
    )

    assert set(item.model_dump()) == {"item_number", "summary"}
    assert set(incident.model_dump()) == {"incident_number", "summary", "follow_up"}
    assert ErrorResponse(error="x").model_dump() == {"error": "x"}


def test_summary_openapi_contract_registered() -> None:
    client = TestClient(app)
    spec = client.get("/openapi.json").json()
    for path in ("/hse-summary", "/hse-summary-item", "/hse-summary-incident"):
        assert "post" in spec["paths"][path]
        assert "404" in spec["paths"][path]["post"]["responses"]
    assert "ErrorResponse" in spec["components"]["schemas"]
