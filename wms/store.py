"""The combined query set and transaction handling."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy.engine import Connection, Engine

from wms.inbound_queries import InboundQueries
from wms.inventory_queries import InventoryQueries

T = TypeVar("T")


class TransactionError(Exception):
    """Raised when a failed transaction could not be rolled back either."""


class Queries(InventoryQueries, InboundQueries):
    """Every query, bound to one connection or transaction."""

    def with_tx(self, tx: Connection) -> Queries:
        """Return a query set bound to ``tx``."""
        return Queries(tx)


class Store:
    """Runs query sets inside database transactions."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Yield queries in a transaction; commit on success, roll back on error."""
        with self.engine.connect() as conn:
            tx = conn.begin()
            try:
                yield Queries(conn)
            except BaseException as exc:
                try:
                    tx.rollback()
                except Exception as rb_exc:
                    raise TransactionError(
                        f"tx err: {exc}, rb err: {rb_exc}"
                    ) from exc
                raise
            tx.commit()

    def exec_tx(self, fn: Callable[[Queries], T]) -> T:
        """Call ``fn`` with transactional queries and return its result."""
        with self.transaction() as queries:
            return fn(queries)

    def __repr__(self) -> str:
        return f"Store(engine={self.engine!r})"


def _unused(_: Any) -> None:  # pragma: no cover
    return None