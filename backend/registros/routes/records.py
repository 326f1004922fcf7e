"""
Registros API - Record Route Handlers
======================================

What:  The five CRUD routes under /registros.
How:   Each handler checks the request shape, makes exactly one RecordStore
       call, and maps the outcome to a status code. Failures are raised as
       application exceptions and turned into `{"error": ...}` bodies by the
       global handlers in main.py.

Route Inventory:
    GET    /registros        → list_all   → 200 [Record]
    GET    /registros/{id}   → get_by_id  → 200 Record | 404
    POST   /registros        → insert     → 201 Record | 400
    PUT    /registros/{id}   → update     → 200 Record | 400 | 404
    DELETE /registros/{id}   → delete     → 200 {message} | 404
    (any storage failure → 500)

Path ids arrive as strings. One that is not a base-10 integer, or is too
large for SQLite, cannot name a stored row and is answered with 404 like any
other unknown id.
"""

import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends

from registros.dependencies import get_record_store
from registros.exceptions import NotFoundError, ValidationError
from registros.schemas.record import (
    ErrorResponse,
    MessageResponse,
    RecordCreate,
    RecordResponse,
    RecordUpdate,
)
from registros.services.record_store import RecordStore

logger = logging.getLogger(__name__)

TITLE_REQUIRED = "Title is required"
RECORD_NOT_FOUND = "Record not found"
RECORD_REMOVED = "Record removed successfully"

router = APIRouter(prefix="/registros", tags=["Registros"])


_INTEGER_ID = re.compile(r"[+-]?[0-9]+")


def _require_title(title: Optional[str]) -> str:
    """Return the title, or raise a 400 when it is missing or empty."""
    if not title:
        raise ValidationError(message=TITLE_REQUIRED, field="title")
    return title


def _parse_record_id(raw: str) -> int:
    """Convert a path id to an int, raising NotFoundError when it is not one."""
    if not _INTEGER_ID.fullmatch(raw):
        raise NotFoundError(message=RECORD_NOT_FOUND, resource_id=raw)
    try:
        return int(raw)
    except ValueError:
        # More digits than int() will convert
        raise NotFoundError(message=RECORD_NOT_FOUND, resource_id=raw) from None


@router.get(
    "",
    response_model=List[RecordResponse],
    responses={500: {"description": "Storage error", "model": ErrorResponse}},
    summary="List all records",
)
async def list_records(
    store: RecordStore = Depends(get_record_store),
) -> List[RecordResponse]:
    """Every stored record; an empty array when the table is empty."""
    records = await store.list_all()
    return [RecordResponse.model_validate(record) for record in records]


@router.get(
    "/{record_id}",
    response_model=RecordResponse,
    responses={
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Get a single record by ID",
)
async def get_record(
    record_id: str,
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse:
    record_id = _parse_record_id(record_id)
    record = await store.get_by_id(record_id)
    if record is None:
        raise NotFoundError(message=RECORD_NOT_FOUND, resource_id=record_id)
    return RecordResponse.model_validate(record)


@router.post(
    "",
    status_code=201,
    response_model=RecordResponse,
    responses={
        400: {"description": "Missing title or malformed body", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Create a record",
)
async def create_record(
    body: RecordCreate,
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse:
    """
    Create a record from `{title, description?}`.

    The response echoes the stored row, including the id SQLite assigned and
    `completed = 0`.
    """
    title = _require_title(body.title)
    record = await store.insert(title=title, description=body.description)
    logger.info("Created record %d", record.id)
    return RecordResponse.model_validate(record)


@router.put(
    "/{record_id}",
    response_model=RecordResponse,
    responses={
        400: {"description": "Missing title or malformed body", "model": ErrorResponse},
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Replace a record",
)
async def update_record(
    record_id: str,
    body: RecordUpdate,
    store: RecordStore = Depends(get_record_store),
) -> RecordResponse:
    """
    Overwrite every field of a record.

    Full replace, not a patch: a field missing from the body is stored as
    null. The response echoes the submitted values rather than re-reading
    the row. The title is checked before the id, so a missing title is a
    400 even when the id names no record.
    """
    title = _require_title(body.title)
    record_id = _parse_record_id(record_id)
    affected = await store.update(
        record_id,
        title=title,
        description=body.description,
        completed=body.completed,
    )
    if affected == 0:
        raise NotFoundError(message=RECORD_NOT_FOUND, resource_id=record_id)
    logger.info("Updated record %d", record_id)
    return RecordResponse(
        id=record_id,
        title=title,
        description=body.description,
        completed=body.completed,
    )


@router.delete(
    "/{record_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Delete a record",
)
async def delete_record(
    record_id: str,
    store: RecordStore = Depends(get_record_store),
) -> MessageResponse:
    record_id = _parse_record_id(record_id)
    affected = await store.delete(record_id)
    if affected == 0:
        raise NotFoundError(message=RECORD_NOT_FOUND, resource_id=record_id)
    logger.info("Deleted record %d", record_id)
    return MessageResponse(message=RECORD_REMOVED)
