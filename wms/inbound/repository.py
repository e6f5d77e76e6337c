"""Inbound persistence: query results mapped to domain objects."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Union

from wms import records
from wms.inbound.models import (
    IncomingSchedule,
    IncomingScheduleItem,
    LocationSummary,
    ProductReceipt,
    ProductReceiptItem,
    ProductSummary,
    ScheduleSummary,
)
from wms.inbound_queries import (
    GetIncomingScheduleItemsRow,
    GetProductReceiptItemsRow,
    GetProductReceiptRow,
    ListProductReceiptsRow,
)
from wms.pagination import Pagination, new_pagination
from wms.store import Queries

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_ReceiptRow = Union[GetProductReceiptRow, ListProductReceiptsRow]


def _quantity(value: Decimal | None) -> Decimal:
    return value if value is not None else Decimal(0)


def _schedule(row: records.IncomingSchedule) -> IncomingSchedule:
    return IncomingSchedule(
        id=row.id,
        location_id=row.location_id,
        po_number=row.po_number,
        expected_date=row.expected_date,
        status=row.status,
        note=row.note,
        received_quantity=_quantity(row.received_quantity),
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _schedule_item(row: records.IncomingScheduleItem) -> IncomingScheduleItem:
    return IncomingScheduleItem(
        id=row.id,
        incoming_schedule_id=row.incoming_schedule_id,
        product_id=row.product_id,
        quantity=_quantity(row.quantity),
        received_quantity=_quantity(row.received_quantity),
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _schedule_item_row(row: GetIncomingScheduleItemsRow) -> IncomingScheduleItem:
    return IncomingScheduleItem(
        id=row.id,
        incoming_schedule_id=row.incoming_schedule_id,
        product_id=row.product_id,
        product=ProductSummary(
            name=row.product_name, sku_code=row.product_sku_code, uom=row.product_uom
        ),
        quantity=_quantity(row.quantity),
        received_quantity=_quantity(row.received_quantity),
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _receipt(row: records.ProductReceipt) -> ProductReceipt:
    return ProductReceipt(
        id=row.id,
        incoming_schedule_id=row.incoming_schedule_id,
        location_id=row.location_id,
        received_date=row.received_date,
        received_by=row.received_by,
        note=row.note,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _receipt_row(row: _ReceiptRow) -> ProductReceipt:
    schedule = None
    if row.schedule_po_number is not None:
        schedule = ScheduleSummary(
            po_number=row.schedule_po_number,
            expected_date=row.schedule_expected_date or _ZERO_TIME,
        )
    return ProductReceipt(
        id=row.id,
        incoming_schedule_id=row.incoming_schedule_id,
        incoming_schedule=schedule,
        location_id=row.location_id,
        location=LocationSummary(
            name=row.location_name or "", code=row.location_code or ""
        ),
        received_date=row.received_date,
        received_by=row.received_by,
        note=row.note,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _receipt_item_row(row: GetProductReceiptItemsRow) -> ProductReceiptItem:
    return ProductReceiptItem(
        id=row.id,
        product_receipt_id=row.product_receipt_id,
        product_id=row.product_id,
        product=ProductSummary(
            name=row.product_name, sku_code=row.product_sku_code, uom=row.product_uom
        ),
        quantity=_quantity(row.quantity),
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


class Repository:
    """Schedules, receipts and stock updates for the inbound flow."""

    def __init__(self, querier: Queries) -> None:
        self.querier = querier

    def with_tx(self, querier: Queries) -> Repository:
        """Return a repository bound to a transactional query set."""
        return Repository(querier)

    def create_schedule(
        self, location_id: int, po_number: str, expected_date: datetime, note: str | None
    ) -> IncomingSchedule:
        return _schedule(
            self.querier.create_incoming_schedule(
                location_id, po_number, expected_date, note
            )
        )

    def get_schedule(self, schedule_id: int) -> IncomingSchedule:
        return _schedule(self.querier.get_incoming_schedule(schedule_id))

    def list_schedules(
        self, page: int, limit: int
    ) -> tuple[list[IncomingSchedule], Pagination]:
        offset = (page - 1) * limit
        rows = self.querier.list_incoming_schedules(limit, offset)
        total = self.querier.count_incoming_schedules()
        return [_schedule(row) for row in rows], new_pagination(page, limit, total)

    def update_schedule(
        self,
        schedule_id: int,
        location_id: int,
        po_number: str,
        expected_date: datetime,
        status: str,
        note: str | None,
    ) -> IncomingSchedule:
        return _schedule(
            self.querier.update_incoming_schedule(
                schedule_id, location_id, po_number, expected_date, status, note
            )
        )

    def delete_schedule(self, schedule_id: int) -> None:
        """Soft-delete a schedule; raise NoRowsError if none was live."""
        if self.querier.delete_incoming_schedule(schedule_id) == 0:
            raise records.NoRowsError()

    def upsert_schedule_item(
        self,
        schedule_id: int,
        product_id: int,
        quantity: Decimal,
        received_quantity: Decimal,
        status: str,
    ) -> IncomingScheduleItem:
        return _schedule_item(
            self.querier.upsert_incoming_schedule_item(
                schedule_id, product_id, quantity, received_quantity, status
            )
        )

    def get_schedule_items(self, schedule_id: int) -> list[IncomingScheduleItem]:
        return [
            _schedule_item_row(row)
            for row in self.querier.get_incoming_schedule_items(schedule_id)
        ]

    def delete_schedule_items(self, schedule_id: int) -> None:
        self.querier.delete_incoming_schedule_items(schedule_id)

    def create_receipt(
        self,
        incoming_schedule_id: int | None,
        location_id: int,
        received_date: datetime,
        received_by: int,
        note: str | None,
    ) -> ProductReceipt:
        return _receipt(
            self.querier.create_product_receipt(
                incoming_schedule_id, location_id, received_date, received_by, note
            )
        )

    def get_receipt(self, receipt_id: int) -> ProductReceipt:
        return _receipt_row(self.querier.get_product_receipt(receipt_id))

    def list_receipts(
        self, page: int, limit: int
    ) -> tuple[list[ProductReceipt], Pagination]:
        offset = (page - 1) * limit
        rows = self.querier.list_product_receipts(limit, offset)
        total = self.querier.count_product_receipts()
        return [_receipt_row(row) for row in rows], new_pagination(page, limit, total)

    def bulk_create_receipt_items(
        self,
        receipt_id: int,
        product_ids: Iterable[int],
        quantities: Iterable[Decimal],
    ) -> None:
        self.querier.bulk_create_product_receipt_items(
            receipt_id, list(product_ids), list(quantities)
        )

    def get_receipt_items(self, receipt_id: int) -> list[ProductReceiptItem]:
        return [
            _receipt_item_row(row)
            for row in self.querier.get_product_receipt_items(receipt_id)
        ]

    def increment_schedule_item_received_quantity(
        self, schedule_id: int, product_id: int, quantity: Decimal
    ) -> None:
        self.querier.increment_schedule_item_received_quantity(
            schedule_id, product_id, quantity
        )

    def increment_schedule_received_quantity(
        self, schedule_id: int, quantity: Decimal
    ) -> None:
        self.querier.increment_schedule_received_quantity(schedule_id, quantity)

    def bulk_add_inventories(
        self,
        product_ids: Iterable[int],
        location_ids: Iterable[int],
        quantities: Iterable[Decimal],
    ) -> None:
        self.querier.bulk_add_inventories(
            list(product_ids), list(location_ids), list(quantities)
        )