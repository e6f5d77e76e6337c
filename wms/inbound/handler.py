"""HTTP endpoints for the inbound flow."""

from __future__ import annotations

import re
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request

from wms.inbound.models import (
    BindingError,
    CreateReceiptRequest,
    CreateScheduleRequest,
    UpdateScheduleRequest,
    to_json,
)
from wms.inbound.service import Service
from wms.pagination import Pagination, PaginationError, StandardResponse, parse_pagination_query
from wms.records import NoRowsError

_PREFIX = "/inbound-products"
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

Reply = tuple[Response, int]


class _InvalidId(ValueError):
    pass


def _parse_id(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise _InvalidId(text)
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise _InvalidId(text)
    return value


def _reply(
    status: HTTPStatus,
    message: str,
    data: Any = None,
    pagination: Pagination | None = None,
) -> Reply:
    body = StandardResponse(message=message, data=to_json(data), pagination=pagination)
    return jsonify(body.to_dict()), int(status)


def _body() -> Any:
    return request.get_json(force=True, silent=True)


class Handler:
    """Binds inbound service operations to HTTP routes."""

    def __init__(self, service: Service) -> None:
        self.service = service

    def register_routes(self, app: Flask) -> None:
        """Register every inbound route on ``app``."""
        routes = [
            ("/schedule", "POST", self.create_schedule),
            ("/schedule", "GET", self.list_schedules),
            ("/schedule/<schedule_id>", "GET", self.get_schedule),
            ("/schedule/<schedule_id>", "PUT", self.update_schedule),
            ("/schedule/<schedule_id>", "DELETE", self.delete_schedule),
            ("/receipt", "POST", self.create_receipt),
            ("/receipt", "GET", self.list_receipts),
            ("/receipt/<receipt_id>", "GET", self.get_receipt),
        ]
        for path, method, view in routes:
            app.add_url_rule(
                _PREFIX + path,
                endpoint=f"inbound_products.{view.__name__}",
                view_func=view,
                methods=[method],
            )

    def create_schedule(self) -> Reply:
        try:
            req = CreateScheduleRequest.from_json(_body())
        except BindingError as exc:
            return _reply(HTTPStatus.BAD_REQUEST, str(exc))
        try:
            res = self.service.create_schedule(req)
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.CREATED, "Schedule created successfully", res)

    def get_schedule(self, schedule_id: str) -> Reply:
        try:
            parsed = _parse_id(schedule_id)
        except _InvalidId:
            return _reply(HTTPStatus.BAD_REQUEST, "invalid id")
        try:
            res = self.service.get_schedule(parsed)
        except NoRowsError:
            return _reply(HTTPStatus.NOT_FOUND, "schedule not found")
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.OK, "Schedule fetched successfully", res)

    def list_schedules(self) -> Reply:
        try:
            page, limit = parse_pagination_query(request.args)
        except PaginationError as exc:
            return _reply(HTTPStatus.BAD_REQUEST, str(exc))
        try:
            res, pagination = self.service.list_schedules(page, limit)
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.OK, "Schedules fetched successfully", res, pagination)

    def update_schedule(self, schedule_id: str) -> Reply:
        try:
            parsed = _parse_id(schedule_id)
        except _InvalidId:
            return _reply(HTTPStatus.BAD_REQUEST, "invalid id")
        try:
            req = UpdateScheduleRequest.from_json(_body())
        except BindingError as exc:
            return _reply(HTTPStatus.BAD_REQUEST, str(exc))
        try:
            res = self.service.update_schedule(parsed, req)
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.OK, "Schedule updated successfully", res)

    def delete_schedule(self, schedule_id: str) -> Reply:
        try:
            parsed = _parse_id(schedule_id)
        except _InvalidId:
            return _reply(HTTPStatus.BAD_REQUEST, "invalid id")
        try:
            self.service.delete_schedule(parsed)
        except NoRowsError:
            return _reply(HTTPStatus.NOT_FOUND, "schedule not found")
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.OK, "Schedule deleted successfully")

    def create_receipt(self) -> Reply:
        try:
            req = CreateReceiptRequest.from_json(_body())
        except BindingError as exc:
            return _reply(HTTPStatus.BAD_REQUEST, str(exc))
        try:
            res = self.service.create_receipt(req)
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.CREATED, "Receipt created successfully", res)

    def get_receipt(self, receipt_id: str) -> Reply:
        try:
            parsed = _parse_id(receipt_id)
        except _InvalidId:
            return _reply(HTTPStatus.BAD_REQUEST, "invalid id")
        try:
            res = self.service.get_receipt(parsed)
        except NoRowsError:
            return _reply(HTTPStatus.NOT_FOUND, "receipt not found")
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.OK, "Receipt fetched successfully", res)

    def list_receipts(self) -> Reply:
        try:
            page, limit = parse_pagination_query(request.args)
        except PaginationError as exc:
            return _reply(HTTPStatus.BAD_REQUEST, str(exc))
        try:
            res, pagination = self.service.list_receipts(page, limit)
        except Exception as exc:
            return _reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _reply(HTTPStatus.OK, "Receipts fetched successfully", res, pagination)