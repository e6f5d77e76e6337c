"""Queries for incoming schedules, product receipts and their items."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from wms.records import IncomingSchedule, IncomingScheduleItem, ProductReceipt, QueriesBase, Record

_SCHEDULE_COLUMNS = (
    "id, location_id, po_number, expected_date, status, note, "
    "received_quantity, created_at, updated_at, deleted_at"
)
_SCHEDULE_ITEM_COLUMNS = (
    "id, incoming_schedule_id, product_id, quantity, received_quantity, "
    "status, created_at, updated_at, deleted_at"
)
_RECEIPT_COLUMNS = (
    "id, incoming_schedule_id, location_id, received_date, received_by, "
    "note, created_at, updated_at, deleted_at"
)

_RECEIPT_JOIN_SELECT = """
SELECT r.id AS id, r.incoming_schedule_id AS incoming_schedule_id,
  r.location_id AS location_id, r.received_date AS received_date,
  r.received_by AS received_by, r.note AS note,
  r.created_at AS created_at, r.updated_at AS updated_at,
  r.deleted_at AS deleted_at,
  l.name AS location_name, l.code AS location_code,
  s.po_number AS schedule_po_number, s.expected_date AS schedule_expected_date
FROM product_receipts r
LEFT JOIN locations l ON r.location_id = l.id
LEFT JOIN incoming_schedules s ON r.incoming_schedule_id = s.id
"""

_BULK_CREATE_PRODUCT_RECEIPT_ITEMS = """
INSERT INTO product_receipt_items (product_receipt_id, product_id, quantity)
VALUES (:product_receipt_id, :product_id, :quantity)
"""

_COUNT_INCOMING_SCHEDULES = """
SELECT COUNT(*) FROM incoming_schedules
WHERE deleted_at IS NULL
"""

_COUNT_PRODUCT_RECEIPTS = """
SELECT COUNT(*) FROM product_receipts
WHERE deleted_at IS NULL
"""

_CREATE_INCOMING_SCHEDULE = f"""
INSERT INTO incoming_schedules (location_id, po_number, expected_date, note)
VALUES (:location_id, :po_number, :expected_date, :note)
RETURNING {_SCHEDULE_COLUMNS}
"""

_CREATE_PRODUCT_RECEIPT = f"""
INSERT INTO product_receipts (
  incoming_schedule_id, location_id, received_date, received_by, note
) VALUES (
  :incoming_schedule_id, :location_id, :received_date, :received_by, :note
)
RETURNING {_RECEIPT_COLUMNS}
"""

_DELETE_INCOMING_SCHEDULE = """
UPDATE incoming_schedules
SET deleted_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
"""

_DELETE_INCOMING_SCHEDULE_ITEMS = """
UPDATE incoming_schedule_items
SET deleted_at = CURRENT_TIMESTAMP
WHERE incoming_schedule_id = :incoming_schedule_id AND deleted_at IS NULL
"""

_GET_INCOMING_SCHEDULE = f"""
SELECT {_SCHEDULE_COLUMNS} FROM incoming_schedules
WHERE id = :id AND deleted_at IS NULL LIMIT 1
"""

_GET_INCOMING_SCHEDULE_ITEMS = """
SELECT i.id AS id, i.incoming_schedule_id AS incoming_schedule_id,
  i.product_id AS product_id, i.quantity AS quantity,
  i.received_quantity AS received_quantity, i.status AS status,
  i.created_at AS created_at, i.updated_at AS updated_at,
  i.deleted_at AS deleted_at,
  p.name AS product_name, p.sku_code AS product_sku_code, p.uom AS product_uom
FROM incoming_schedule_items i
JOIN products p ON i.product_id = p.id
WHERE i.incoming_schedule_id = :incoming_schedule_id AND i.deleted_at IS NULL
"""

_GET_PRODUCT_RECEIPT = (
    _RECEIPT_JOIN_SELECT + "WHERE r.id = :id AND r.deleted_at IS NULL LIMIT 1\n"
)

_GET_PRODUCT_RECEIPT_ITEMS = """
SELECT i.id AS id, i.product_receipt_id AS product_receipt_id,
  i.product_id AS product_id, i.quantity AS quantity,
  i.created_at AS created_at, i.updated_at AS updated_at,
  i.deleted_at AS deleted_at,
  p.name AS product_name, p.sku_code AS product_sku_code, p.uom AS product_uom
FROM product_receipt_items i
JOIN products p ON i.product_id = p.id
WHERE i.product_receipt_id = :product_receipt_id AND i.deleted_at IS NULL
"""

_INCREMENT_SCHEDULE_ITEM_RECEIVED_QUANTITY = """
UPDATE incoming_schedule_items
SET received_quantity = received_quantity + :received_quantity,
    updated_at = CURRENT_TIMESTAMP
WHERE incoming_schedule_id = :incoming_schedule_id
  AND product_id = :product_id AND deleted_at IS NULL
"""

_INCREMENT_SCHEDULE_RECEIVED_QUANTITY = """
UPDATE incoming_schedules
SET received_quantity = received_quantity + :received_quantity,
    updated_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
"""

_LIST_INCOMING_SCHEDULES = f"""
SELECT {_SCHEDULE_COLUMNS} FROM incoming_schedules
WHERE deleted_at IS NULL
ORDER BY created_at DESC
LIMIT :limit OFFSET :offset
"""

_LIST_PRODUCT_RECEIPTS = _RECEIPT_JOIN_SELECT + """WHERE r.deleted_at IS NULL
ORDER BY r.created_at DESC
LIMIT :limit OFFSET :offset
"""

_UPDATE_INCOMING_SCHEDULE = f"""
UPDATE incoming_schedules
SET location_id = :location_id, po_number = :po_number,
    expected_date = :expected_date, status = :status, note = :note,
    updated_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
RETURNING {_SCHEDULE_COLUMNS}
"""

_UPSERT_INCOMING_SCHEDULE_ITEM = f"""
INSERT INTO incoming_schedule_items (
  incoming_schedule_id, product_id, quantity, received_quantity, status
) VALUES (
  :incoming_schedule_id, :product_id, :quantity, :received_quantity, :status
)
ON CONFLICT (incoming_schedule_id, product_id) DO UPDATE SET
  quantity = excluded.quantity,
  received_quantity = excluded.received_quantity,
  status = excluded.status,
  updated_at = CURRENT_TIMESTAMP,
  deleted_at = NULL
RETURNING {_SCHEDULE_ITEM_COLUMNS}
"""


@dataclass(frozen=True)
class GetIncomingScheduleItemsRow(Record):
    id: int
    incoming_schedule_id: int
    product_id: int
    quantity: Decimal
    received_quantity: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    product_name: str
    product_sku_code: str
    product_uom: str


@dataclass(frozen=True)
class GetProductReceiptRow(Record):
    id: int
    incoming_schedule_id: int | None
    location_id: int
    received_date: datetime
    received_by: int
    note: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    location_name: str | None
    location_code: str | None
    schedule_po_number: str | None
    schedule_expected_date: datetime | None


@dataclass(frozen=True)
class GetProductReceiptItemsRow(Record):
    id: int
    product_receipt_id: int
    product_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    product_name: str
    product_sku_code: str
    product_uom: str


@dataclass(frozen=True)
class ListProductReceiptsRow(Record):
    id: int
    incoming_schedule_id: int | None
    location_id: int
    received_date: datetime
    received_by: int
    note: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    location_name: str | None
    location_code: str | None
    schedule_po_number: str | None
    schedule_expected_date: datetime | None


def _decimal_text(quantity: Any) -> str:
    """Render a quantity as an exact decimal string."""
    value = quantity if isinstance(quantity, Decimal) else Decimal(str(quantity))
    return str(value)


class InboundQueries(QueriesBase):
    """Incoming schedule and product receipt queries."""

    def bulk_create_product_receipt_items(
        self,
        product_receipt_id: int,
        product_ids: Iterable[int],
        quantities: Iterable[Any],
    ) -> None:
        """Insert one receipt item per product and quantity pair."""
        products, amounts = list(product_ids), list(quantities)
        if len(products) != len(amounts):
            raise ValueError("product_ids and quantities must have the same length")
        self._execute_many(
            _BULK_CREATE_PRODUCT_RECEIPT_ITEMS,
            [
                {
                    "product_receipt_id": product_receipt_id,
                    "product_id": int(product_id),
                    "quantity": _decimal_text(amount),
                }
                for product_id, amount in zip(products, amounts)
            ],
        )

    def count_incoming_schedules(self) -> int:
        return int(self._scalar(_COUNT_INCOMING_SCHEDULES))

    def count_product_receipts(self) -> int:
        return int(self._scalar(_COUNT_PRODUCT_RECEIPTS))

    def create_incoming_schedule(
        self,
        location_id: int,
        po_number: str,
        expected_date: datetime,
        note: str | None,
    ) -> IncomingSchedule:
        return self._fetch_one(
            IncomingSchedule,
            _CREATE_INCOMING_SCHEDULE,
            {
                "location_id": location_id,
                "po_number": po_number,
                "expected_date": expected_date,
                "note": note,
            },
        )

    def create_product_receipt(
        self,
        incoming_schedule_id: int | None,
        location_id: int,
        received_date: datetime,
        received_by: int,
        note: str | None,
    ) -> ProductReceipt:
        return self._fetch_one(
            ProductReceipt,
            _CREATE_PRODUCT_RECEIPT,
            {
                "incoming_schedule_id": incoming_schedule_id,
                "location_id": location_id,
                "received_date": received_date,
                "received_by": received_by,
                "note": note,
            },
        )

    def delete_incoming_schedule(self, schedule_id: int) -> int:
        """Soft-delete a schedule; return the number of rows affected."""
        return self._rowcount(_DELETE_INCOMING_SCHEDULE, {"id": schedule_id})

    def delete_incoming_schedule_items(self, incoming_schedule_id: int) -> None:
        """Soft-delete every live item of a schedule."""
        self._execute(
            _DELETE_INCOMING_SCHEDULE_ITEMS,
            {"incoming_schedule_id": incoming_schedule_id},
        )

    def get_incoming_schedule(self, schedule_id: int) -> IncomingSchedule:
        return self._fetch_one(
            IncomingSchedule, _GET_INCOMING_SCHEDULE, {"id": schedule_id}
        )

    def get_incoming_schedule_items(
        self, incoming_schedule_id: int
    ) -> list[GetIncomingScheduleItemsRow]:
        return self._fetch_all(
            GetIncomingScheduleItemsRow,
            _GET_INCOMING_SCHEDULE_ITEMS,
            {"incoming_schedule_id": incoming_schedule_id},
        )

    def get_product_receipt(self, receipt_id: int) -> GetProductReceiptRow:
        return self._fetch_one(
            GetProductReceiptRow, _GET_PRODUCT_RECEIPT, {"id": receipt_id}
        )

    def get_product_receipt_items(
        self, product_receipt_id: int
    ) -> list[GetProductReceiptItemsRow]:
        return self._fetch_all(
            GetProductReceiptItemsRow,
            _GET_PRODUCT_RECEIPT_ITEMS,
            {"product_receipt_id": product_receipt_id},
        )

    def increment_schedule_item_received_quantity(
        self, incoming_schedule_id: int, product_id: int, received_quantity: Any
    ) -> None:
        self._execute(
            _INCREMENT_SCHEDULE_ITEM_RECEIVED_QUANTITY,
            {
                "incoming_schedule_id": incoming_schedule_id,
                "product_id": product_id,
                "received_quantity": _decimal_text(received_quantity),
            },
        )

    def increment_schedule_received_quantity(
        self, schedule_id: int, received_quantity: Any
    ) -> None:
        self._execute(
            _INCREMENT_SCHEDULE_RECEIVED_QUANTITY,
            {"id": schedule_id, "received_quantity": _decimal_text(received_quantity)},
        )

    def list_incoming_schedules(
        self, limit: int, offset: int
    ) -> list[IncomingSchedule]:
        return self._fetch_all(
            IncomingSchedule,
            _LIST_INCOMING_SCHEDULES,
            {"limit": limit, "offset": offset},
        )

    def list_product_receipts(
        self, limit: int, offset: int
    ) -> list[ListProductReceiptsRow]:
        return self._fetch_all(
            ListProductReceiptsRow,
            _LIST_PRODUCT_RECEIPTS,
            {"limit": limit, "offset": offset},
        )

    def update_incoming_schedule(
        self,
        schedule_id: int,
        location_id: int,
        po_number: str,
        expected_date: datetime,
        status: str,
        note: str | None,
    ) -> IncomingSchedule:
        return self._fetch_one(
            IncomingSchedule,
            _UPDATE_INCOMING_SCHEDULE,
            {
                "id": schedule_id,
                "location_id": location_id,
                "po_number": po_number,
                "expected_date": expected_date,
                "status": status,
                "note": note,
            },
        )

    def upsert_incoming_schedule_item(
        self,
        incoming_schedule_id: int,
        product_id: int,
        quantity: Any,
        received_quantity: Any,
        status: str,
    ) -> IncomingScheduleItem:
        """Insert an item, or revive and overwrite the existing one."""
        return self._fetch_one(
            IncomingScheduleItem,
            _UPSERT_INCOMING_SCHEDULE_ITEM,
            {
                "incoming_schedule_id": incoming_schedule_id,
                "product_id": product_id,
                "quantity": _decimal_text(quantity),
                "received_quantity": _decimal_text(received_quantity),
                "status": status,
            },
        )