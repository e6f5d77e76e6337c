"""Inbound domain objects, request payloads and their JSON form."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_OMIT_EMPTY = {"omitempty": True}

T = TypeVar("T")


class BindingError(ValueError):
    """Raised when a request body does not have the expected shape."""


class Status(str, Enum):
    """Lifecycle state of a schedule or schedule item."""

    PENDING = "pending"
    RECEIVED = "received"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


@dataclass(kw_only=True)
class ProductSummary:
    name: str
    sku_code: str
    uom: str


@dataclass(kw_only=True)
class ScheduleSummary:
    po_number: str
    expected_date: datetime


@dataclass(kw_only=True)
class LocationSummary:
    name: str
    code: str


@dataclass(kw_only=True)
class IncomingScheduleItem:
    """One product line of a scheduled arrival."""

    id: int
    incoming_schedule_id: int
    product_id: int
    product: ProductSummary | None = field(default=None, metadata=_OMIT_EMPTY)
    quantity: Decimal
    received_quantity: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class IncomingSchedule:
    """A scheduled product arrival."""

    id: int
    location_id: int
    po_number: str
    expected_date: datetime
    status: str
    note: str | None = None
    received_quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    items: list[IncomingScheduleItem] | None = None


@dataclass(kw_only=True)
class ProductReceiptItem:
    """One product line of a receipt."""

    id: int
    product_receipt_id: int
    product_id: int
    product: ProductSummary | None = field(default=None, metadata=_OMIT_EMPTY)
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class ProductReceipt:
    """A physical receipt of products at a location."""

    id: int
    incoming_schedule_id: int | None = None
    incoming_schedule: ScheduleSummary | None = field(
        default=None, metadata=_OMIT_EMPTY
    )
    location_id: int
    location: LocationSummary | None = field(default=None, metadata=_OMIT_EMPTY)
    received_date: datetime
    received_by: int
    note: str | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    items: list[ProductReceiptItem] | None = None


def _format_decimal(value: Decimal) -> str:
    if not value.is_finite():
        return str(value)
    text = format(value.normalize(), "f")
    return "0" if text == "-0" else text


def _format_datetime(value: datetime) -> str:
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if offset is None:
        return text
    if offset == timedelta(0):
        return text + "Z"
    total = int(offset.total_seconds()) // 60
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def to_json(obj: Any) -> Any:
    """Convert domain objects into JSON-compatible values."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return _format_decimal(obj)
    if isinstance(obj, datetime):
        return _format_datetime(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        body: dict[str, Any] = {}
        for fld in dataclasses.fields(obj):
            value = getattr(obj, fld.name)
            if value is None and fld.metadata.get("omitempty"):
                continue
            body[fld.name] = to_json(value)
        return body
    if isinstance(obj, Mapping):
        return {str(key): to_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json(value) for value in obj]
    return obj


def _require_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise BindingError(f"{what} must be a JSON object")
    return data


def _check_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise BindingError(f"{key} must be an integer")
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise BindingError(f"{key} is out of range")
    return value


def _required_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        raise BindingError(f"{key} is required")
    result = _check_int(key, value)
    if result == 0:
        raise BindingError(f"{key} is required")
    return result


def _optional_int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    return None if value is None else _check_int(key, value)


def _string(data: Mapping[str, Any], key: str, *, required: bool = False) -> str:
    value = data.get(key)
    if value is None:
        if required:
            raise BindingError(f"{key} is required")
        return ""
    if not isinstance(value, str):
        raise BindingError(f"{key} must be a string")
    if required and not value:
        raise BindingError(f"{key} is required")
    return value


def _decimal(data: Mapping[str, Any], key: str, *, required: bool = False) -> Decimal:
    value = data.get(key)
    if value is None:
        if required:
            raise BindingError(f"{key} is required")
        return Decimal(0)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise BindingError(f"{key} must be a number")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise BindingError(f"{key} must be a number") from None
    if not result.is_finite():
        raise BindingError(f"{key} must be a number")
    return result


def _items(
    data: Mapping[str, Any], key: str, parse: Callable[[Mapping[str, Any]], T]
) -> list[T]:
    value = data.get(key)
    if value is None:
        raise BindingError(f"{key} is required")
    if not isinstance(value, list):
        raise BindingError(f"{key} must be an array")
    if not value:
        raise BindingError(f"{key} must contain at least 1 item")
    return [parse(_require_object(entry, f"each of {key}")) for entry in value]


@dataclass(kw_only=True)
class CreateScheduleItem:
    product_id: int
    quantity: Decimal

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> CreateScheduleItem:
        return cls(
            product_id=_required_int(data, "product_id"),
            quantity=_decimal(data, "quantity", required=True),
        )


@dataclass(kw_only=True)
class CreateScheduleRequest:
    location_id: int
    po_number: str
    expected_date: str
    note: str = ""
    items: list[CreateScheduleItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> CreateScheduleRequest:
        """Bind a decoded JSON body, checking required fields."""
        body = _require_object(data, "request body")
        return cls(
            location_id=_required_int(body, "location_id"),
            po_number=_string(body, "po_number", required=True),
            expected_date=_string(body, "expected_date", required=True),
            note=_string(body, "note"),
            items=_items(body, "items", CreateScheduleItem._from_json),
        )


@dataclass(kw_only=True)
class UpdateScheduleItem:
    product_id: int
    quantity: Decimal
    received_quantity: Decimal = Decimal(0)
    status: str = ""

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> UpdateScheduleItem:
        return cls(
            product_id=_required_int(data, "product_id"),
            quantity=_decimal(data, "quantity", required=True),
            received_quantity=_decimal(data, "received_quantity"),
            status=_string(data, "status"),
        )


@dataclass(kw_only=True)
class UpdateScheduleRequest:
    location_id: int
    po_number: str
    expected_date: str
    status: str
    note: str = ""
    items: list[UpdateScheduleItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> UpdateScheduleRequest:
        """Bind a decoded JSON body, checking required fields."""
        body = _require_object(data, "request body")
        return cls(
            location_id=_required_int(body, "location_id"),
            po_number=_string(body, "po_number", required=True),
            expected_date=_string(body, "expected_date", required=True),
            status=_string(body, "status", required=True),
            note=_string(body, "note"),
            items=_items(body, "items", UpdateScheduleItem._from_json),
        )


@dataclass(kw_only=True)
class CreateReceiptItem:
    product_id: int
    quantity: Decimal

    @classmethod
    def _from_json(cls, data: Mapping[str, Any]) -> CreateReceiptItem:
        return cls(
            product_id=_required_int(data, "product_id"),
            quantity=_decimal(data, "quantity", required=True),
        )


@dataclass(kw_only=True)
class CreateReceiptRequest:
    location_id: int
    received_date: str
    received_by: int
    incoming_schedule_id: int | None = None
    note: str = ""
    items: list[CreateReceiptItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> CreateReceiptRequest:
        """Bind a decoded JSON body, checking required fields."""
        body = _require_object(data, "request body")
        return cls(
            location_id=_required_int(body, "location_id"),
            incoming_schedule_id=_optional_int(body, "incoming_schedule_id"),
            received_date=_string(body, "received_date", required=True),
            received_by=_required_int(body, "received_by"),
            note=_string(body, "note"),
            items=_items(body, "items", CreateReceiptItem._from_json),
        )