"""Queries for products, locations and inventory stock."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from wms.records import Location, Product, QueriesBase, Record

_INVENTORY_ROW_COLUMNS = """
  i.product_id AS product_id, i.location_id AS location_id,
  i.quantity AS quantity, i.created_at AS created_at,
  i.updated_at AS updated_at, i.deleted_at AS deleted_at"""

_BULK_INSERT = """
INSERT INTO inventories (product_id, location_id, quantity, updated_at)
VALUES (:product_id, :location_id, :quantity, CURRENT_TIMESTAMP)
ON CONFLICT (product_id, location_id) DO UPDATE SET
  quantity = {quantity},
  updated_at = CURRENT_TIMESTAMP
"""

_BULK_ADD = _BULK_INSERT.format(quantity="inventories.quantity + excluded.quantity")
_BULK_DEDUCT = _BULK_INSERT.format(
    quantity="inventories.quantity - excluded.quantity"
)
_BULK_UPSERT = _BULK_INSERT.format(quantity="excluded.quantity")

_COUNT_INVENTORIES = """
SELECT COUNT(*) FROM inventories i
JOIN products p ON i.product_id = p.id
JOIN locations l ON i.location_id = l.id
WHERE i.deleted_at IS NULL AND p.deleted_at IS NULL AND l.deleted_at IS NULL
"""

_COUNT_LOCATIONS = """
SELECT COUNT(*) FROM locations
WHERE deleted_at IS NULL
  AND (LOWER(name) LIKE LOWER(:name) OR LOWER(code) LIKE LOWER(:name))
"""

_COUNT_PRODUCTS = """
SELECT COUNT(*) FROM products
WHERE deleted_at IS NULL
  AND (LOWER(name) LIKE LOWER(:name) OR LOWER(sku_code) LIKE LOWER(:name))
"""

_LOCATION_COLUMNS = "id, name, code, created_at, updated_at, deleted_at"
_PRODUCT_COLUMNS = "id, name, sku_code, uom, created_at, updated_at, deleted_at"

_CREATE_LOCATION = f"""
INSERT INTO locations (name, code)
VALUES (:name, :code)
RETURNING {_LOCATION_COLUMNS}
"""

_CREATE_PRODUCT = f"""
INSERT INTO products (name, sku_code, uom)
VALUES (:name, :sku_code, :uom)
RETURNING {_PRODUCT_COLUMNS}
"""

_DELETE_LOCATION = """
UPDATE locations
SET deleted_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
"""

_DELETE_PRODUCT = """
UPDATE products
SET deleted_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
"""

_GET_INVENTORIES_BY_LOCATION = f"""
SELECT {_INVENTORY_ROW_COLUMNS},
  p.name AS product_name, p.sku_code AS product_sku_code, p.uom AS product_uom
FROM inventories i
JOIN products p ON i.product_id = p.id
WHERE i.location_id = :location_id AND i.deleted_at IS NULL AND p.deleted_at IS NULL
"""

_GET_INVENTORIES_BY_PRODUCT = f"""
SELECT {_INVENTORY_ROW_COLUMNS},
  l.name AS location_name, l.code AS location_code
FROM inventories i
JOIN locations l ON i.location_id = l.id
WHERE i.product_id = :product_id AND i.deleted_at IS NULL AND l.deleted_at IS NULL
"""

_GET_INVENTORY_STOCK = """
SELECT quantity FROM inventories
WHERE product_id = :product_id AND location_id = :location_id AND deleted_at IS NULL
"""

_GET_LOCATION = f"""
SELECT {_LOCATION_COLUMNS} FROM locations
WHERE id = :id AND deleted_at IS NULL LIMIT 1
"""

_GET_PRODUCT = f"""
SELECT {_PRODUCT_COLUMNS} FROM products
WHERE id = :id AND deleted_at IS NULL LIMIT 1
"""

_LIST_INVENTORIES = f"""
SELECT {_INVENTORY_ROW_COLUMNS},
  p.name AS product_name, p.sku_code AS product_sku_code, p.uom AS product_uom,
  l.name AS location_name, l.code AS location_code
FROM inventories i
JOIN products p ON i.product_id = p.id
JOIN locations l ON i.location_id = l.id
WHERE i.deleted_at IS NULL AND p.deleted_at IS NULL AND l.deleted_at IS NULL
ORDER BY i.updated_at DESC
LIMIT :limit OFFSET :offset
"""

_LIST_LOCATIONS = f"""
SELECT {_LOCATION_COLUMNS} FROM locations
WHERE deleted_at IS NULL
  AND (LOWER(name) LIKE LOWER(:name) OR LOWER(code) LIKE LOWER(:name))
ORDER BY created_at DESC
LIMIT :limit OFFSET :offset
"""

_LIST_PRODUCTS = f"""
SELECT {_PRODUCT_COLUMNS} FROM products
WHERE deleted_at IS NULL
  AND (LOWER(name) LIKE LOWER(:name) OR LOWER(sku_code) LIKE LOWER(:name))
ORDER BY created_at DESC
LIMIT :limit OFFSET :offset
"""

_UPDATE_LOCATION = f"""
UPDATE locations
SET name = :name, code = :code, updated_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
RETURNING {_LOCATION_COLUMNS}
"""

_UPDATE_PRODUCT = f"""
UPDATE products
SET name = :name, sku_code = :sku_code, uom = :uom, updated_at = CURRENT_TIMESTAMP
WHERE id = :id AND deleted_at IS NULL
RETURNING {_PRODUCT_COLUMNS}
"""


@dataclass(frozen=True)
class GetInventoriesByLocationRow(Record):
    product_id: int
    location_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    product_name: str
    product_sku_code: str
    product_uom: str


@dataclass(frozen=True)
class GetInventoriesByProductRow(Record):
    product_id: int
    location_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    location_name: str
    location_code: str


@dataclass(frozen=True)
class ListInventoriesRow(Record):
    product_id: int
    location_id: int
    quantity: Decimal
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    product_name: str
    product_sku_code: str
    product_uom: str
    location_name: str
    location_code: str


def _quantity_text(quantity: Any) -> str:
    """Render a quantity as an exact decimal string."""
    value = quantity if isinstance(quantity, Decimal) else Decimal(str(quantity))
    return str(value)


def _bulk_rows(
    product_ids: Iterable[int],
    location_ids: Iterable[int],
    quantities: Iterable[Any],
) -> list[dict[str, Any]]:
    products, locations, amounts = list(product_ids), list(location_ids), list(quantities)
    if not len(products) == len(locations) == len(amounts):
        raise ValueError(
            "product_ids, location_ids and quantities must have the same length"
        )
    return [
        {
            "product_id": int(product_id),
            "location_id": int(location_id),
            "quantity": _quantity_text(amount),
        }
        for product_id, location_id, amount in zip(products, locations, amounts)
    ]


class InventoryQueries(QueriesBase):
    """Product, location and stock queries."""

    def bulk_add_inventories(
        self,
        product_ids: Iterable[int],
        location_ids: Iterable[int],
        quantities: Iterable[Any],
    ) -> None:
        """Add quantities to stock, creating missing inventory rows."""
        self._execute_many(_BULK_ADD, _bulk_rows(product_ids, location_ids, quantities))

    def bulk_deduct_inventories(
        self,
        product_ids: Iterable[int],
        location_ids: Iterable[int],
        quantities: Iterable[Any],
    ) -> None:
        """Subtract quantities from existing stock; new rows get the quantity."""
        self._execute_many(
            _BULK_DEDUCT, _bulk_rows(product_ids, location_ids, quantities)
        )

    def bulk_upsert_inventories(
        self,
        product_ids: Iterable[int],
        location_ids: Iterable[int],
        quantities: Iterable[Any],
    ) -> None:
        """Set stock to the given quantities."""
        self._execute_many(
            _BULK_UPSERT, _bulk_rows(product_ids, location_ids, quantities)
        )

    def count_inventories(self) -> int:
        return int(self._scalar(_COUNT_INVENTORIES))

    def count_locations(self, name: str) -> int:
        """Count locations whose name or code matches the LIKE pattern."""
        return int(self._scalar(_COUNT_LOCATIONS, {"name": name}))

    def count_products(self, name: str) -> int:
        """Count products whose name or SKU matches the LIKE pattern."""
        return int(self._scalar(_COUNT_PRODUCTS, {"name": name}))

    def create_location(self, name: str, code: str) -> Location:
        return self._fetch_one(Location, _CREATE_LOCATION, {"name": name, "code": code})

    def create_product(self, name: str, sku_code: str, uom: str) -> Product:
        return self._fetch_one(
            Product, _CREATE_PRODUCT, {"name": name, "sku_code": sku_code, "uom": uom}
        )

    def delete_location(self, location_id: int) -> int:
        """Soft-delete a location; return the number of rows affected."""
        return self._rowcount(_DELETE_LOCATION, {"id": location_id})

    def delete_product(self, product_id: int) -> int:
        """Soft-delete a product; return the number of rows affected."""
        return self._rowcount(_DELETE_PRODUCT, {"id": product_id})

    def get_inventories_by_location(
        self, location_id: int
    ) -> list[GetInventoriesByLocationRow]:
        return self._fetch_all(
            GetInventoriesByLocationRow,
            _GET_INVENTORIES_BY_LOCATION,
            {"location_id": location_id},
        )

    def get_inventories_by_product(
        self, product_id: int
    ) -> list[GetInventoriesByProductRow]:
        return self._fetch_all(
            GetInventoriesByProductRow,
            _GET_INVENTORIES_BY_PRODUCT,
            {"product_id": product_id},
        )

    def get_inventory_stock(self, product_id: int, location_id: int) -> Decimal:
        """Return the stock of a product at a location."""
        row = self._execute(
            _GET_INVENTORY_STOCK,
            {"product_id": product_id, "location_id": location_id},
        ).first()
        if row is None:
            from wms.records import NoRowsError

            raise NoRowsError()
        quantity = row[0]
        return quantity if isinstance(quantity, Decimal) else Decimal(str(quantity))

    def get_location(self, location_id: int) -> Location:
        return self._fetch_one(Location, _GET_LOCATION, {"id": location_id})

    def get_product(self, product_id: int) -> Product:
        return self._fetch_one(Product, _GET_PRODUCT, {"id": product_id})

    def list_inventories(self, limit: int, offset: int) -> list[ListInventoriesRow]:
        return self._fetch_all(
            ListInventoriesRow, _LIST_INVENTORIES, {"limit": limit, "offset": offset}
        )

    def list_locations(self, name: str, limit: int, offset: int) -> list[Location]:
        return self._fetch_all(
            Location, _LIST_LOCATIONS, {"name": name, "limit": limit, "offset": offset}
        )

    def list_products(self, name: str, limit: int, offset: int) -> list[Product]:
        return self._fetch_all(
            Product, _LIST_PRODUCTS, {"name": name, "limit": limit, "offset": offset}
        )

    def update_location(self, location_id: int, name: str, code: str) -> Location:
        return self._fetch_one(
            Location, _UPDATE_LOCATION, {"id": location_id, "name": name, "code": code}
        )

    def update_product(
        self, product_id: int, name: str, sku_code: str, uom: str
    ) -> Product:
        return self._fetch_one(
            Product,
            _UPDATE_PRODUCT,
            {"id": product_id, "name": name, "sku_code": sku_code, "uom": uom},
        )