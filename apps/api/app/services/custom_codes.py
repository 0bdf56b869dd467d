"""Custom code snippet service layer."""

from __future__ import annotations

import logging

from app.core.logging import safe_log_identifier
from app.errors import not_found
from app.repositories.base import Query, TableGateway
from app.schemas.auth import AuthPrincipal
from app.schemas.custom_code import (
    ActiveCustomCodesResponse,
    CodesByPosition,
    CreateCustomCodeRequest,
    CustomCodeListResponse,
    CustomCodeRecord,
    CustomCodeResponse,
    DeletedCustomCode,
    DeletedCustomCodeResponse,
    UpdateCustomCodeRequest,
)
from app.services.common import fetch_one, update_one

logger = logging.getLogger(__name__)

_CODES = "custom_codes"
_NOT_FOUND = "Custom code not found"
_NEWEST_FIRST = [("created_at", True)]


class CustomCodeService:
    def __init__(self, tables: TableGateway) -> None:
        self._tables = tables

    def _listing(self, query: Query) -> list[CustomCodeRecord]:
        return [CustomCodeRecord.model_validate(row) for row in self._tables.select(_CODES, query).rows]

    def list_codes(self) -> CustomCodeListResponse:
        codes = self._listing(Query(order=list(_NEWEST_FIRST)))
        return CustomCodeListResponse(codes=codes, total=len(codes))

    def list_by_type(self, code_type: str) -> CustomCodeListResponse:
        codes = self._listing(Query(eq={"type": code_type}, order=list(_NEWEST_FIRST)))
        return CustomCodeListResponse(codes=codes, total=len(codes))

    def list_active(self) -> ActiveCustomCodesResponse:
        codes = self._listing(Query(eq={"status": True}, order=[("position", False), *_NEWEST_FIRST]))
        grouped = CodesByPosition()
        for code in codes:
            getattr(grouped, code.position).append(code)
        return ActiveCustomCodesResponse(codes=grouped, total=len(codes))

    def get_code(self, code_id: str) -> CustomCodeResponse:
        row = fetch_one(self._tables, _CODES, {"id": code_id}, not_found_message=_NOT_FOUND)
        return CustomCodeResponse(code=CustomCodeRecord.model_validate(row))

    def create_code(self, principal: AuthPrincipal, payload: CreateCustomCodeRequest) -> CustomCodeResponse:
        record = payload.model_dump()
        record["author_name"] = payload.author_name or principal.display_name
        row = self._tables.insert(_CODES, record)
        logger.info(
            "custom_code.created code_id=%s type=%s position=%s user_id=%s",
            row["id"],
            row["type"],
            row["position"],
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return CustomCodeResponse(message="Custom code created successfully", code=CustomCodeRecord.model_validate(row))

    def update_code(self, code_id: str, payload: UpdateCustomCodeRequest) -> CustomCodeResponse:
        row = update_one(self._tables, _CODES, {"id": code_id}, payload.changes(), not_found_message=_NOT_FOUND)
        logger.info("custom_code.updated code_id=%s", code_id)
        return CustomCodeResponse(message="Custom code updated successfully", code=CustomCodeRecord.model_validate(row))

    def toggle_code(self, code_id: str) -> CustomCodeResponse:
        current = fetch_one(self._tables, _CODES, {"id": code_id}, not_found_message=_NOT_FOUND, columns="id, status")
        new_status = not bool(current.get("status"))
        row = update_one(self._tables, _CODES, {"id": code_id}, {"status": new_status}, not_found_message=_NOT_FOUND)
        state = "enabled" if new_status else "disabled"
        logger.info("custom_code.toggled code_id=%s status=%s", code_id, state)
        return CustomCodeResponse(
            message=f"Custom code {state} successfully",
            code=CustomCodeRecord.model_validate(row),
        )

    def delete_code(self, principal: AuthPrincipal, code_id: str) -> DeletedCustomCodeResponse:
        removed = self._tables.delete(_CODES, Query(eq={"id": code_id}))
        if not removed:
            raise not_found(_NOT_FOUND)
        logger.warning(
            "custom_code.deleted code_id=%s deleted_by=%s",
            code_id,
            safe_log_identifier(principal.user_id, prefix="uid"),
        )
        return DeletedCustomCodeResponse(
            message="Custom code deleted successfully",
            deleted_code=DeletedCustomCode(id=removed[0]["id"], name=removed[0]["name"]),
        )


__all__ = ["CustomCodeService"]
