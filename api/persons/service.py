"""
Person business logic.

Every storage failure surfaces as a generic 500; nothing is retried and no
driver detail reaches the client.

Update is a read-modify-write merge that is not wrapped in a transaction:
two concurrent PATCHes on the same id may interleave, and the last full
four-column write wins.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import asyncpg

from core.errors import InternalError, NotFoundError, ValidationFailed

from . import schemas
from .repository import PersonRepository

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

NOT_FOUND_MESSAGE = "Person not found"


def _name_required() -> ValidationFailed:
    return ValidationFailed("name validation error", {"name": "name is required"})


def merge_fields(current: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay the sent values on the stored ones.

    Fields missing from `changes` keep their stored value, null included.
    """
    merged = {field: current.get(field) for field in schemas.MUTABLE_FIELDS}
    merged.update({k: v for k, v in changes.items() if k in merged})
    return merged


class PersonService:
    def __init__(self, repository: PersonRepository) -> None:
        self.repository = repository

    async def list_persons(self) -> list[schemas.PersonResponse]:
        try:
            rows = await self.repository.list_persons()
        except STORAGE_ERRORS as exc:
            logger.exception("list_persons_failed")
            raise InternalError("Database query error") from exc
        return [schemas.PersonResponse.from_row(row) for row in rows]

    async def create_person(self, payload: schemas.PersonRequest) -> int:
        if schemas.has_blank_name(payload.name):
            raise _name_required()

        try:
            person_id = await self.repository.insert_person(
                name=payload.name,
                age=payload.age,
                address=payload.address,
                work=payload.work,
            )
        except STORAGE_ERRORS as exc:
            logger.exception("create_person_failed")
            raise InternalError("Query error") from exc

        logger.info("person_created id=%s", person_id)
        return person_id

    async def get_person(self, person_id: int) -> schemas.PersonResponse:
        try:
            row = await self.repository.get_person(person_id)
        except STORAGE_ERRORS as exc:
            logger.exception("get_person_failed id=%s", person_id)
            raise InternalError("Scanning error") from exc

        if row is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return schemas.PersonResponse.from_row(row)

    async def update_person(self, person_id: int, payload: schemas.PersonRequest) -> schemas.PersonResponse:
        changes = payload.changes()
        if "name" in changes and schemas.has_blank_name(changes["name"]):
            raise _name_required()

        try:
            exists = await self.repository.person_exists(person_id)
        except STORAGE_ERRORS as exc:
            logger.exception("update_person_lookup_failed id=%s", person_id)
            raise InternalError("Database error") from exc
        if not exists:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        try:
            current = await self.repository.get_mutable_fields(person_id)
        except STORAGE_ERRORS as exc:
            logger.exception("update_person_read_failed id=%s", person_id)
            raise InternalError("Scanning error") from exc
        if current is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        merged = merge_fields(current, changes)
        try:
            updated = await self.repository.update_person(person_id, **merged)
        except STORAGE_ERRORS as exc:
            logger.exception("update_person_failed id=%s", person_id)
            raise InternalError("Failed to update person") from exc
        if not updated:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info("person_updated id=%s fields=%s", person_id, sorted(changes))
        return await self.get_person(person_id)

    async def delete_person(self, person_id: int) -> None:
        try:
            deleted = await self.repository.delete_person(person_id)
        except STORAGE_ERRORS as exc:
            logger.exception("delete_person_failed id=%s", person_id)
            raise InternalError("Database error") from exc

        if not deleted:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("person_deleted id=%s", person_id)
