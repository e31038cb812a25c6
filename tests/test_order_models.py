import pytest
from wms_state.orders.models import order_from_api, status_to_api

PAYLOAD = {
    "orderId": 12, "type": "OUTBOUND", "status": "COMPLETED",
    "companyId": 3, "companyName": "ACME",
    "createdAt": "2025-03-01T09:00:00Z", "updatedAt": "2025-03-01T10:30:00",
    "locationCode": "i-009",
    "items": [
        {"itemId": 7, "itemCode": "T-7", "itemName": "Tornillo", "specification": "M4",
         "requestedQuantity": 20, "actualQuantity": None},
        {"itemId": 8, "itemName": "Tuerca", "requestedQuantity": None, "locationCode": "B002"},
    ],
}

def test_parse_api_payload():
    o = order_from_api(PAYLOAD)
    assert o.order_id == 12 and o.type == "OUTBOUND" and o.status == "completed"
    assert o.created_at.tzinfo is None and o.updated_at.hour == 10
    assert o.lines[0].location_code == "i-009"   # hereda la ubicación de la orden
    assert o.lines[1].location_code == "B002"
    assert o.lines[1].requested_quantity == 0
    assert o.lines[0].actual_quantity is None

def test_rejects_unknown_status_or_type():
    with pytest.raises(ValueError):
        order_from_api({**PAYLOAD, "status": "IN_PROGRESS"})
    with pytest.raises(ValueError):
        order_from_api({**PAYLOAD, "type": "TRANSFER"})

def test_status_to_api_uppercases():
    assert status_to_api("scheduled") == "SCHEDULED"
