"""Business validation of inbound requests."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from wms.inbound.models import (
    CreateReceiptRequest,
    CreateScheduleRequest,
    Status,
    UpdateScheduleRequest,
)

_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_STATUSES = {status.value for status in Status}


class ValidationError(ValueError):
    """Raised when a request breaks a business rule."""


def _parse_date(value: str, name: str) -> datetime:
    try:
        if not _DATE.fullmatch(value):
            raise ValueError(f'cannot parse "{value}" as YYYY-MM-DD')
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise ValidationError(
            f"invalid {name} format, use YYYY-MM-DD: {exc}"
        ) from exc
    return parsed.replace(tzinfo=timezone.utc)


def _check_schedule_header(location_id: int, po_number: str, expected_date: str) -> datetime:
    if location_id <= 0:
        raise ValidationError("location_id must be greater than 0")
    if not po_number.strip():
        raise ValidationError("po_number cannot be empty")
    if expected_date == "":
        raise ValidationError("expected_date cannot be empty")
    return _parse_date(expected_date, "expected_date")


def validate_create_schedule(req: CreateScheduleRequest) -> datetime:
    """Check a new schedule; return its expected date."""
    expected = _check_schedule_header(req.location_id, req.po_number, req.expected_date)
    for item in req.items:
        if item.product_id <= 0:
            raise ValidationError("product_id must be greater than 0")
        if item.quantity < 0:
            raise ValidationError("quantity cannot be negative")
    return expected


def validate_update_schedule(req: UpdateScheduleRequest) -> datetime:
    """Check a schedule update; return its expected date."""
    expected = _check_schedule_header(req.location_id, req.po_number, req.expected_date)
    if req.status.lower() not in _STATUSES:
        raise ValidationError("invalid status")
    for item in req.items:
        if item.product_id <= 0:
            raise ValidationError("product_id must be greater than 0")
        if item.quantity < 0:
            raise ValidationError("quantity cannot be negative")
        if item.received_quantity < 0:
            raise ValidationError("received_quantity cannot be negative")
    return expected


def validate_create_receipt(req: CreateReceiptRequest) -> datetime:
    """Check a new receipt; return its received date."""
    if req.location_id <= 0:
        raise ValidationError("location_id must be greater than 0")
    if req.received_date == "":
        raise ValidationError("received_date cannot be empty")
    received = _parse_date(req.received_date, "received_date")
    if req.received_by <= 0:
        raise ValidationError("received_by must be greater than 0")
    if not req.items:
        raise ValidationError("items cannot be empty")
    for item in req.items:
        if item.product_id <= 0:
            raise ValidationError("product_id must be greater than 0")
        if item.quantity <= 0:
            raise ValidationError("quantity must be greater than 0")
    return received