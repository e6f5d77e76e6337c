"""Pagination metadata, query parsing and the standard response envelope."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_INTEGER = re.compile(r"[+-]?[0-9]+")


class PaginationError(ValueError):
    """Raised when page or limit query parameters are invalid."""


@dataclass(frozen=True)
class Pagination:
    """Page metadata returned alongside list results."""

    page: int
    limit: int
    prev_page: int | None
    next_page: int | None
    total_page: int

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation."""
        return {
            "page": self.page,
            "limit": self.limit,
            "prev_page": self.prev_page,
            "next_page": self.next_page,
            "total_page": self.total_page,
        }


def new_pagination(page: int, limit: int, total_data: int) -> Pagination:
    """Build pagination metadata for ``total_data`` records."""
    if limit <= 0:
        limit = DEFAULT_LIMIT
    total_page = (total_data + limit - 1) // limit if total_data > 0 else 0
    prev_page = page - 1 if page > 1 else None
    next_page = page + 1 if page < total_page else None
    return Pagination(
        page=page,
        limit=limit,
        prev_page=prev_page,
        next_page=next_page,
        total_page=total_page,
    )


def _parse_int(text: str) -> int | None:
    """Parse a decimal 64-bit integer strictly, or return None."""
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def parse_pagination_query(query: Mapping[str, str]) -> tuple[int, int]:
    """Extract and validate ``page`` and ``limit`` from query parameters."""
    page = _parse_int(query.get("page", str(DEFAULT_PAGE)))
    if page is None or page < 1:
        raise PaginationError(
            "invalid page parameter: must be a positive integer greater than 0"
        )

    limit = _parse_int(query.get("limit", str(DEFAULT_LIMIT)))
    if limit is None or limit < 1:
        raise PaginationError(
            "invalid limit parameter: must be a positive integer greater than 0"
        )

    if limit > MAX_LIMIT:
        raise PaginationError(f"limit too large: maximum allowed is {MAX_LIMIT}")

    return page, limit


@dataclass
class StandardResponse:
    """The envelope every API response is wrapped in."""

    message: str
    data: Any = None
    pagination: Pagination | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation; pagination is omitted when absent."""
        body: dict[str, Any] = {"message": self.message, "data": self.data}
        if self.pagination is not None:
            body["pagination"] = self.pagination.to_dict()
        return body