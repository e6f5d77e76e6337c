from datetime import datetime, timezone
from decimal import Decimal

import pytest

from wms.inbound.models import (
    BindingError,
    CreateReceiptRequest,
    CreateScheduleRequest,
    IncomingScheduleItem,
    LocationSummary,
    ProductReceipt,
    ProductSummary,
    Status,
    UpdateScheduleRequest,
    to_json,
)
from wms.pagination import new_pagination

NOW = datetime(2024, 5, 20, tzinfo=timezone.utc)


def make_item(**overrides):
    values = dict(
        id=1,
        incoming_schedule_id=2,
        product_id=3,
        quantity=Decimal("10.50"),
        received_quantity=Decimal("0"),
        status="pending",
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(overrides)
    return IncomingScheduleItem(**values)


def test_status_values():
    assert to_json(Status.PENDING) == "pending"
    assert Status("received") is Status.RECEIVED
    assert Status.CANCELLED.lower() == "cancelled"


def test_item_json_omits_missing_product():
    body = to_json(make_item())
    assert "product" not in body
    assert list(body) == [
        "id",
        "incoming_schedule_id",
        "product_id",
        "quantity",
        "received_quantity",
        "status",
        "created_at",
        "updated_at",
        "deleted_at",
    ]
    assert body["deleted_at"] is None


def test_item_json_includes_product():
    product = ProductSummary(name="Bolt", sku_code="SKU-1", uom="pcs")
    body = to_json(make_item(product=product))
    assert body["product"] == {"name": "Bolt", "sku_code": "SKU-1", "uom": "pcs"}


def test_decimal_rendering():
    assert to_json(Decimal("10.50")) == "10.5"
    assert to_json(Decimal("1E+2")) == "100"


def test_datetime_rendering_utc():
    assert to_json(NOW) == "2024-05-20T00:00:00Z"


def test_receipt_json_nested_summaries():
    receipt = ProductReceipt(
        id=4,
        location_id=5,
        location=LocationSummary(name="Main", code="WH-1"),
        received_date=NOW,
        received_by=6,
        created_at=NOW,
        updated_at=NOW,
    )
    body = to_json(receipt)
    assert body["location"] == {"name": "Main", "code": "WH-1"}
    assert "incoming_schedule" not in body
    assert body["incoming_schedule_id"] is None
    assert body["items"] is None


def test_pagination_json_matches_to_dict():
    pagination = new_pagination(2, 10, 35)
    assert to_json(pagination) == pagination.to_dict()


def test_create_schedule_from_json():
    req = CreateScheduleRequest.from_json(
        {
            "location_id": 1,
            "po_number": "PO-001",
            "expected_date": "2024-05-20",
            "items": [{"product_id": 7, "quantity": 10}],
        }
    )
    assert req.location_id == 1
    assert req.po_number == "PO-001"
    assert req.note == ""
    assert req.items[0].product_id == 7
    assert req.items[0].quantity == Decimal("10")


def test_quantity_accepts_string():
    req = CreateScheduleRequest.from_json(
        {
            "location_id": 1,
            "po_number": "PO-001",
            "expected_date": "2024-05-20",
            "items": [{"product_id": 7, "quantity": "2.25"}],
        }
    )
    assert req.items[0].quantity == Decimal("2.25")


@pytest.mark.parametrize(
    "body",
    [
        {"po_number": "PO-001", "expected_date": "2024-05-20", "items": [{"product_id": 1, "quantity": 1}]},
        {"location_id": 1, "po_number": "", "expected_date": "2024-05-20", "items": [{"product_id": 1, "quantity": 1}]},
        {"location_id": 1, "po_number": "PO-001", "expected_date": "2024-05-20", "items": []},
        {"location_id": 1, "po_number": "PO-001", "expected_date": "2024-05-20"},
        {"location_id": True, "po_number": "PO-001", "expected_date": "2024-05-20", "items": [{"product_id": 1, "quantity": 1}]},
        {"location_id": 1, "po_number": "PO-001", "expected_date": "2024-05-20", "items": [{"product_id": 1, "quantity": "abc"}]},
        {"location_id": 1, "po_number": "PO-001", "expected_date": "2024-05-20", "items": [{"product_id": 1}]},
        ["not", "an", "object"],
    ],
)
def test_create_schedule_binding_errors(body):
    with pytest.raises(BindingError):
        CreateScheduleRequest.from_json(body)


def test_update_schedule_item_defaults():
    req = UpdateScheduleRequest.from_json(
        {
            "location_id": 1,
            "po_number": "PO-001",
            "expected_date": "2024-05-20",
            "status": "pending",
            "items": [{"product_id": 2, "quantity": 5}],
        }
    )
    assert req.status == "pending"
    assert req.items[0].received_quantity == Decimal(0)
    assert req.items[0].status == ""


def test_update_schedule_requires_status():
    with pytest.raises(BindingError, match="status"):
        UpdateScheduleRequest.from_json(
            {
                "location_id": 1,
                "po_number": "PO-001",
                "expected_date": "2024-05-20",
                "items": [{"product_id": 2, "quantity": 5}],
            }
        )


def test_create_receipt_optional_schedule():
    body = {
        "location_id": 1,
        "received_date": "2024-05-20",
        "received_by": 9,
        "items": [{"product_id": 2, "quantity": 5}],
    }
    assert CreateReceiptRequest.from_json(body).incoming_schedule_id is None
    linked = CreateReceiptRequest.from_json({**body, "incoming_schedule_id": 4})
    assert linked.incoming_schedule_id == 4
    assert linked.received_by == 9


def test_create_receipt_requires_received_by():
    with pytest.raises(BindingError, match="received_by"):
        CreateReceiptRequest.from_json(
            {
                "location_id": 1,
                "received_date": "2024-05-20",
                "received_by": 0,
                "items": [{"product_id": 2, "quantity": 5}],
            }
        )