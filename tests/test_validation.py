from datetime import datetime, timezone
from decimal import Decimal

import pytest

from wms.inbound.models import (
    CreateReceiptItem,
    CreateReceiptRequest,
    CreateScheduleItem,
    CreateScheduleRequest,
    Status,
    UpdateScheduleItem,
    UpdateScheduleRequest,
)
from wms.inbound.validation import (
    ValidationError,
    validate_create_receipt,
    validate_create_schedule,
    validate_update_schedule,
)

DEC_31 = datetime(2024, 12, 31, tzinfo=timezone.utc)


def test_create_schedule_valid():
    req = CreateScheduleRequest(
        location_id=1,
        po_number="PO-001",
        expected_date="2024-12-31",
        items=[CreateScheduleItem(product_id=1, quantity=Decimal(10))],
    )
    assert validate_create_schedule(req) == DEC_31


@pytest.mark.parametrize(
    "req, msg",
    [
        (
            CreateScheduleRequest(location_id=0, po_number="PO-001", expected_date="2024-12-31"),
            "location_id must be greater than 0",
        ),
        (
            CreateScheduleRequest(location_id=1, po_number="", expected_date="2024-12-31"),
            "po_number cannot be empty",
        ),
        (
            CreateScheduleRequest(location_id=1, po_number="PO-001", expected_date=""),
            "expected_date cannot be empty",
        ),
        (
            CreateScheduleRequest(location_id=1, po_number="PO-001", expected_date="31-12-2024"),
            "invalid expected_date format",
        ),
        (
            CreateScheduleRequest(
                location_id=1,
                po_number="PO-001",
                expected_date="2024-12-31",
                items=[CreateScheduleItem(product_id=0, quantity=Decimal(10))],
            ),
            "product_id must be greater than 0",
        ),
        (
            CreateScheduleRequest(
                location_id=1,
                po_number="PO-001",
                expected_date="2024-12-31",
                items=[CreateScheduleItem(product_id=1, quantity=Decimal(-1))],
            ),
            "quantity cannot be negative",
        ),
    ],
)
def test_create_schedule_invalid(req, msg):
    with pytest.raises(ValidationError, match=msg):
        validate_create_schedule(req)


def test_create_schedule_rejects_blank_po_number():
    req = CreateScheduleRequest(location_id=1, po_number="   ", expected_date="2024-12-31")
    with pytest.raises(ValidationError, match="po_number cannot be empty"):
        validate_create_schedule(req)


def test_create_schedule_rejects_impossible_date():
    req = CreateScheduleRequest(location_id=1, po_number="PO-001", expected_date="2024-02-30")
    with pytest.raises(ValidationError, match="invalid expected_date format"):
        validate_create_schedule(req)


def test_update_schedule_valid():
    req = UpdateScheduleRequest(
        location_id=1,
        po_number="PO-001",
        expected_date="2024-12-31",
        status=Status.PENDING,
        items=[
            UpdateScheduleItem(
                product_id=1,
                quantity=Decimal(10),
                received_quantity=Decimal(0),
                status=Status.PENDING,
            )
        ],
    )
    assert validate_update_schedule(req) == DEC_31


def test_update_schedule_status_is_case_insensitive():
    req = UpdateScheduleRequest(
        location_id=1, po_number="PO-001", expected_date="2024-12-31", status="RECEIVED"
    )
    assert validate_update_schedule(req) == DEC_31


def test_update_schedule_invalid_status():
    req = UpdateScheduleRequest(
        location_id=1, po_number="PO-001", expected_date="2024-12-31", status="unknown"
    )
    with pytest.raises(ValidationError, match="invalid status"):
        validate_update_schedule(req)


def test_update_schedule_negative_received_quantity():
    req = UpdateScheduleRequest(
        location_id=1,
        po_number="PO-001",
        expected_date="2024-12-31",
        status=Status.PENDING,
        items=[
            UpdateScheduleItem(
                product_id=1, quantity=Decimal(10), received_quantity=Decimal(-1)
            )
        ],
    )
    with pytest.raises(ValidationError, match="received_quantity cannot be negative"):
        validate_update_schedule(req)


def test_create_receipt_valid():
    req = CreateReceiptRequest(
        location_id=1,
        received_date="2024-12-31",
        received_by=1,
        items=[CreateReceiptItem(product_id=1, quantity=Decimal(10))],
    )
    assert validate_create_receipt(req) == DEC_31


def test_create_receipt_empty_items():
    req = CreateReceiptRequest(
        location_id=1, received_date="2024-12-31", received_by=1, items=[]
    )
    with pytest.raises(ValidationError, match="items cannot be empty"):
        validate_create_receipt(req)


def test_create_receipt_zero_quantity():
    req = CreateReceiptRequest(
        location_id=1,
        received_date="2024-12-31",
        received_by=1,
        items=[CreateReceiptItem(product_id=1, quantity=Decimal(0))],
    )
    with pytest.raises(ValidationError, match="quantity must be greater than 0"):
        validate_create_receipt(req)


def test_create_receipt_requires_receiver():
    req = CreateReceiptRequest(
        location_id=1,
        received_date="2024-12-31",
        received_by=0,
        items=[CreateReceiptItem(product_id=1, quantity=Decimal(1))],
    )
    with pytest.raises(ValidationError, match="received_by must be greater than 0"):
        validate_create_receipt(req)