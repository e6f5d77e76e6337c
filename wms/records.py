"""Row records for every table and the base class the query sets build on."""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult

R = TypeVar("R", bound="Record")

_TYPES_BY_NAME: dict[str, type] = {
    "int": int,
    "str": str,
    "datetime": datetime,
    "date": date,
    "Decimal": Decimal,
}


class NoRowsError(LookupError):
    """Raised when a query that must return a row returns none."""

    def __init__(self, message: str = "no rows in result set") -> None:
        super().__init__(message)


def _resolve(annotation: Any) -> Any:
    """Turn a field annotation into the column's base type, Optional removed."""
    if isinstance(annotation, str):
        parts = [part.strip() for part in annotation.split("|")]
        names = [part for part in parts if part != "None"]
        if len(names) == 1:
            return _TYPES_BY_NAME.get(names[0], Any)
        return Any
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


@functools.cache
def _field_types(cls: type) -> dict[str, Any]:
    """Map each dataclass field to its type, with Optional unwrapped."""
    return {field.name: _resolve(field.type) for field in dataclasses.fields(cls)}


def _coerce(value: Any, target: Any) -> Any:
    """Convert a raw column value to the field's declared type."""
    if value is None:
        return None
    if target is datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        return datetime.fromisoformat(str(value))
    if target is date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return datetime.fromisoformat(str(value)).date()
    if target is Decimal:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    if target is int and not isinstance(value, bool):
        return int(value)
    if target is str:
        return value if isinstance(value, str) else str(value)
    return value


class Record:
    """Base for immutable row records built from query results."""

    @classmethod
    def from_row(cls: type[R], row: Any) -> R:
        """Build a record from a result row or a mapping of column names."""
        mapping: Mapping[str, Any] = getattr(row, "_mapping", row)
        return cls(
            **{
                name: _coerce(mapping[name], target)
                for name, target in _field_types(cls).items()
            }
        )


class QueriesBase:
    """Runs SQL on one connection or transaction and maps rows to records."""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def _execute(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> CursorResult[Any]:
        return self.conn.execute(text(sql), dict(params or {}))

    def _execute_many(self, sql: str, rows: list[dict[str, Any]]) -> None:
        if rows:
            self.conn.execute(text(sql), rows)

    def _scalar(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._execute(sql, params).scalar_one()

    def _rowcount(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        return self._execute(sql, params).rowcount

    def _fetch_one(
        self, record: type[R], sql: str, params: Mapping[str, Any] | None = None
    ) -> R:
        row = self._execute(sql, params).first()
        if row is None:
            raise NoRowsError()
        return record.from_row(row)

    def _fetch_all(
        self, record: type[R], sql: str, params: Mapping[str, Any] | None = None
    ) -> list[R]:
        return [record.from_row(row) for row in self._execute(sql, params)]


@dataclass(frozen=True)
class Customer(Record):
    id: int
    name: str
    address: str
    contact_name: str | None
    contact_info: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class Delivery(Record):
    id: int
    delivery_order_id: int
    user_id: int
    location_id: int
    delivered_at: datetime
    vehicle_number: str | None
    note: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class DeliveryItem(Record):
    id: int
    delivery_id: int
    product_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class DeliveryOrder(Record):
    id: int
    customer_id: int
    order_number: str
    delivery_date: datetime
    status: str
    note: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class DeliveryOrderItem(Record):
    id: int
    delivery_order_id: int
    product_id: int
    quantity: Decimal
    delivered_quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class IncomingSchedule(Record):
    id: int
    location_id: int
    po_number: str
    expected_date: datetime
    status: str
    note: str | None
    received_quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class IncomingScheduleItem(Record):
    id: int
    incoming_schedule_id: int
    product_id: int
    quantity: Decimal
    received_quantity: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class Inventory(Record):
    product_id: int
    location_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class Location(Record):
    id: int
    name: str
    code: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class Product(Record):
    id: int
    name: str
    sku_code: str
    uom: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class ProductReceipt(Record):
    id: int
    incoming_schedule_id: int | None
    location_id: int
    received_date: datetime
    received_by: int
    note: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class ProductReceiptItem(Record):
    id: int
    product_receipt_id: int
    product_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class Role(Record):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


@dataclass(frozen=True)
class User(Record):
    id: int
    username: str
    created_at: datetime
    nik: str | None
    password: str | None
    full_name: str | None
    role_id: int | None
    updated_at: datetime
    deleted_at: datetime | None