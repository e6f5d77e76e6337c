"""Inbound business operations: schedules, receipts and stock intake."""

from __future__ import annotations

from decimal import Decimal

from wms.inbound.models import (
    CreateReceiptRequest,
    CreateScheduleRequest,
    IncomingSchedule,
    ProductReceipt,
    Status,
    UpdateScheduleRequest,
)
from wms.inbound.repository import Repository
from wms.inbound.validation import (
    validate_create_receipt,
    validate_create_schedule,
    validate_update_schedule,
)
from wms.pagination import Pagination
from wms.store import Queries, Store


def _note(text: str) -> str | None:
    """An empty note is stored as NULL."""
    return text if text != "" else None


class Service:
    """Coordinates the inbound repository inside transactions."""

    def __init__(self, repo: Repository, store: Store) -> None:
        self.repo = repo
        self.store = store

    def create_schedule(self, req: CreateScheduleRequest) -> IncomingSchedule:
        """Create a schedule with its items and return it as stored."""
        expected_date = validate_create_schedule(req)

        def work(queries: Queries) -> int:
            tx_repo = self.repo.with_tx(queries)
            created = tx_repo.create_schedule(
                req.location_id, req.po_number, expected_date, _note(req.note)
            )
            for item in req.items:
                tx_repo.upsert_schedule_item(
                    created.id,
                    item.product_id,
                    item.quantity,
                    Decimal(0),
                    Status.PENDING.value,
                )
            return created.id

        schedule_id = self.store.exec_tx(work)
        return self.get_schedule(schedule_id)

    def get_schedule(self, schedule_id: int) -> IncomingSchedule:
        """Return a schedule with its live items."""
        schedule = self.repo.get_schedule(schedule_id)
        schedule.items = self.repo.get_schedule_items(schedule_id)
        return schedule

    def list_schedules(
        self, page: int, limit: int
    ) -> tuple[list[IncomingSchedule], Pagination]:
        return self.repo.list_schedules(page, limit)

    def update_schedule(
        self, schedule_id: int, req: UpdateScheduleRequest
    ) -> IncomingSchedule:
        """Update a schedule and replace its items with the requested ones."""
        expected_date = validate_update_schedule(req)

        def work(queries: Queries) -> None:
            tx_repo = self.repo.with_tx(queries)
            tx_repo.update_schedule(
                schedule_id,
                req.location_id,
                req.po_number,
                expected_date,
                req.status,
                _note(req.note),
            )
            # Existing items are soft-deleted; the upsert revives the ones kept.
            tx_repo.delete_schedule_items(schedule_id)
            for item in req.items:
                tx_repo.upsert_schedule_item(
                    schedule_id,
                    item.product_id,
                    item.quantity,
                    item.received_quantity,
                    item.status,
                )

        self.store.exec_tx(work)
        return self.get_schedule(schedule_id)

    def delete_schedule(self, schedule_id: int) -> None:
        """Soft-delete a schedule and its items."""

        def work(queries: Queries) -> None:
            tx_repo = self.repo.with_tx(queries)
            tx_repo.delete_schedule_items(schedule_id)
            tx_repo.delete_schedule(schedule_id)

        self.store.exec_tx(work)

    def create_receipt(self, req: CreateReceiptRequest) -> ProductReceipt:
        """Record a receipt, update its schedule and add the stock."""
        received_date = validate_create_receipt(req)
        product_ids = [item.product_id for item in req.items]
        quantities = [item.quantity for item in req.items]

        def work(queries: Queries) -> int:
            tx_repo = self.repo.with_tx(queries)
            created = tx_repo.create_receipt(
                req.incoming_schedule_id,
                req.location_id,
                received_date,
                req.received_by,
                _note(req.note),
            )
            tx_repo.bulk_create_receipt_items(created.id, product_ids, quantities)

            if req.incoming_schedule_id is not None:
                total_received = Decimal(0)
                for item in req.items:
                    total_received += item.quantity
                    tx_repo.increment_schedule_item_received_quantity(
                        req.incoming_schedule_id, item.product_id, item.quantity
                    )
                tx_repo.increment_schedule_received_quantity(
                    req.incoming_schedule_id, total_received
                )

            tx_repo.bulk_add_inventories(
                product_ids, [req.location_id] * len(quantities), quantities
            )
            return created.id

        receipt_id = self.store.exec_tx(work)
        return self.get_receipt(receipt_id)

    def get_receipt(self, receipt_id: int) -> ProductReceipt:
        """Return a receipt with its live items."""
        receipt = self.repo.get_receipt(receipt_id)
        receipt.items = self.repo.get_receipt_items(receipt_id)
        return receipt

    def list_receipts(
        self, page: int, limit: int
    ) -> tuple[list[ProductReceipt], Pagination]:
        return self.repo.list_receipts(page, limit)