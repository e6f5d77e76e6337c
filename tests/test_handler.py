from datetime import datetime, timezone
from decimal import Decimal
from http import HTTPStatus

import pytest
from flask import Flask

from wms.inbound.handler import Handler
from wms.inbound.models import (
    CreateReceiptRequest,
    CreateScheduleRequest,
    IncomingSchedule,
    ProductReceipt,
    UpdateScheduleRequest,
    to_json,
)
from wms.inbound.validation import ValidationError
from wms.pagination import new_pagination
from wms.records import NoRowsError

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
SCHEDULE = IncomingSchedule(
    id=7,
    location_id=1,
    po_number="PO-001",
    expected_date=NOW,
    status="pending",
    received_quantity=Decimal(0),
    created_at=NOW,
    updated_at=NOW,
    items=[],
)
RECEIPT = ProductReceipt(
    id=3,
    location_id=1,
    received_date=NOW,
    received_by=1,
    created_at=NOW,
    updated_at=NOW,
    items=[],
)
PAGINATION = new_pagination(2, 20, 45)

SCHEDULE_BODY = {
    "location_id": 1,
    "po_number": "PO-001",
    "expected_date": "2024-05-20",
    "items": [{"product_id": 1, "quantity": 10}],
}
UPDATE_BODY = {
    "location_id": 1,
    "po_number": "PO-001-UPD",
    "expected_date": "2024-05-21",
    "status": "pending",
    "items": [{"product_id": 1, "quantity": 15}],
}
RECEIPT_BODY = {
    "location_id": 1,
    "received_date": "2024-12-31",
    "received_by": 1,
    "items": [{"product_id": 1, "quantity": 10}],
}


class FakeService:
    def __init__(self):
        self.calls = []
        self.error = None

    def _call(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    def create_schedule(self, req):
        self._call("create_schedule", req)
        return SCHEDULE

    def get_schedule(self, schedule_id):
        self._call("get_schedule", schedule_id)
        return SCHEDULE

    def list_schedules(self, page, limit):
        self._call("list_schedules", page, limit)
        return [SCHEDULE], PAGINATION

    def update_schedule(self, schedule_id, req):
        self._call("update_schedule", schedule_id, req)
        return SCHEDULE

    def delete_schedule(self, schedule_id):
        self._call("delete_schedule", schedule_id)

    def create_receipt(self, req):
        self._call("create_receipt", req)
        return RECEIPT

    def get_receipt(self, receipt_id):
        self._call("get_receipt", receipt_id)
        return RECEIPT

    def list_receipts(self, page, limit):
        self._call("list_receipts", page, limit)
        return [RECEIPT], PAGINATION


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def client(service):
    app = Flask(__name__)
    Handler(service).register_routes(app)
    return app.test_client()


def test_create_schedule_success(client, service):
    resp = client.post("/inbound-products/schedule", json=SCHEDULE_BODY)
    body = resp.get_json()
    assert resp.status_code == HTTPStatus.CREATED
    assert body["message"] == "Schedule created successfully"
    assert body["data"] == to_json(SCHEDULE)
    assert "pagination" not in body
    [(name, (req,))] = service.calls
    assert name == "create_schedule"
    assert isinstance(req, CreateScheduleRequest)
    assert req.po_number == "PO-001"


def test_create_schedule_missing_field(client, service):
    body = dict(SCHEDULE_BODY)
    del body["po_number"]
    resp = client.post("/inbound-products/schedule", json=body)
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert "po_number" in resp.get_json()["message"]
    assert service.calls == []


def test_create_schedule_malformed_json(client, service):
    resp = client.post(
        "/inbound-products/schedule", data="{", content_type="application/json"
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.get_json()["data"] is None
    assert service.calls == []


def test_create_schedule_service_error_is_500(client, service):
    service.error = ValidationError("po_number cannot be empty")
    resp = client.post("/inbound-products/schedule", json=SCHEDULE_BODY)
    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert resp.get_json()["message"] == "po_number cannot be empty"


def test_get_schedule_success(client, service):
    resp = client.get("/inbound-products/schedule/7")
    assert resp.status_code == HTTPStatus.OK
    assert resp.get_json()["message"] == "Schedule fetched successfully"
    assert resp.get_json()["data"] == to_json(SCHEDULE)
    assert service.calls == [("get_schedule", (7,))]


def test_get_schedule_invalid_id(client, service):
    resp = client.get("/inbound-products/schedule/abc")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.get_json()["message"] == "invalid id"
    assert service.calls == []


def test_get_schedule_not_found(client, service):
    service.error = NoRowsError()
    resp = client.get("/inbound-products/schedule/7")
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.get_json()["message"] == "schedule not found"


def test_get_schedule_other_error(client, service):
    service.error = RuntimeError("connection lost")
    resp = client.get("/inbound-products/schedule/7")
    assert resp.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert resp.get_json()["message"] == "connection lost"


def test_list_schedules_with_pagination(client, service):
    resp = client.get("/inbound-products/schedule?page=2&limit=20")
    body = resp.get_json()
    assert resp.status_code == HTTPStatus.OK
    assert body["message"] == "Schedules fetched successfully"
    assert body["data"] == [to_json(SCHEDULE)]
    assert body["pagination"] == PAGINATION.to_dict()
    assert service.calls == [("list_schedules", (2, 20))]


def test_list_schedules_limit_too_large(client, service):
    resp = client.get("/inbound-products/schedule?limit=101")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert "limit too large" in resp.get_json()["message"]
    assert service.calls == []


def test_update_schedule_success(client, service):
    resp = client.put("/inbound-products/schedule/5", json=UPDATE_BODY)
    assert resp.status_code == HTTPStatus.OK
    assert resp.get_json()["message"] == "Schedule updated successfully"
    [(name, (schedule_id, req))] = service.calls
    assert name == "update_schedule"
    assert schedule_id == 5
    assert isinstance(req, UpdateScheduleRequest)
    assert req.po_number == "PO-001-UPD"


def test_update_schedule_invalid_id(client, service):
    resp = client.put("/inbound-products/schedule/x1", json=UPDATE_BODY)
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.get_json()["message"] == "invalid id"


def test_delete_schedule_success(client, service):
    resp = client.delete("/inbound-products/schedule/5")
    assert resp.status_code == HTTPStatus.OK
    assert resp.get_json() == {
        "message": "Schedule deleted successfully",
        "data": None,
    }
    assert service.calls == [("delete_schedule", (5,))]


def test_delete_schedule_not_found(client, service):
    service.error = NoRowsError()
    resp = client.delete("/inbound-products/schedule/5")
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.get_json()["message"] == "schedule not found"


def test_create_receipt_success(client, service):
    resp = client.post("/inbound-products/receipt", json=RECEIPT_BODY)
    assert resp.status_code == HTTPStatus.CREATED
    assert resp.get_json()["message"] == "Receipt created successfully"
    assert resp.get_json()["data"] == to_json(RECEIPT)
    [(name, (req,))] = service.calls
    assert isinstance(req, CreateReceiptRequest)
    assert req.incoming_schedule_id is None


def test_create_receipt_empty_items(client, service):
    body = dict(RECEIPT_BODY, items=[])
    resp = client.post("/inbound-products/receipt", json=body)
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert service.calls == []


def test_get_receipt_not_found(client, service):
    service.error = NoRowsError()
    resp = client.get("/inbound-products/receipt/3")
    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.get_json()["message"] == "receipt not found"


def test_get_receipt_success(client, service):
    resp = client.get("/inbound-products/receipt/3")
    assert resp.status_code == HTTPStatus.OK
    assert resp.get_json()["message"] == "Receipt fetched successfully"
    assert service.calls == [("get_receipt", (3,))]


def test_list_receipts_defaults(client, service):
    resp = client.get("/inbound-products/receipt")
    body = resp.get_json()
    assert resp.status_code == HTTPStatus.OK
    assert body["message"] == "Receipts fetched successfully"
    assert body["data"] == [to_json(RECEIPT)]
    assert service.calls == [("list_receipts", (1, 10))]


def test_list_receipts_invalid_page(client, service):
    resp = client.get("/inbound-products/receipt?page=0")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert "invalid page parameter" in resp.get_json()["message"]