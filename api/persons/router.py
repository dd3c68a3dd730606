"""
Person CRUD endpoints under /api/v1/persons.
"""

from __future__ import annotations

import re

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError

from core.errors import BadRequestError, InternalError, ValidationFailed

from . import schemas
from .service import PersonService

PREFIX = "/api/v1/persons"

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

_PERSON_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": schemas.PersonRequest.model_json_schema()}},
    }
}

_ERRORS = {
    400: {"model": schemas.ErrorResponse, "description": "Malformed id or body, or a field failed validation"},
    404: {"model": schemas.ErrorResponse},
    500: {"model": schemas.ErrorResponse},
}

router = APIRouter(prefix=PREFIX, responses=_ERRORS)


def get_person_service(request: Request) -> PersonService:
    service = getattr(request.app.state, "person_service", None)
    if service is None:
        raise InternalError("Database not initialized")
    return service


def parse_person_id(raw: str, *, message: str = "Invalid ID format") -> int:
    """
    Accept an optionally signed decimal that fits the INT id column.
    """
    if not _ID_PATTERN.fullmatch(raw or ""):
        raise BadRequestError(message)
    value = int(raw)
    if not schemas.INT32_MIN <= value <= schemas.INT32_MAX:
        raise BadRequestError(message)
    return value


def decode_person_request(raw: bytes) -> schemas.PersonRequest:
    return schemas.PersonRequest.model_validate_json(raw or b"")


def person_location(person_id: int) -> str:
    return f"{PREFIX}/{person_id}"


@router.get("", response_model=list[schemas.PersonResponse], response_model_exclude_none=True)
async def list_persons(
    service: PersonService = Depends(get_person_service),
) -> list[schemas.PersonResponse]:
    return await service.list_persons()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    openapi_extra=_PERSON_BODY,
)
async def create_person(
    request: Request,
    service: PersonService = Depends(get_person_service),
) -> Response:
    try:
        payload = decode_person_request(await request.body())
    except ValidationError as exc:
        raise BadRequestError("json decoding error") from exc

    person_id = await service.create_person(payload)
    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": person_location(person_id)},
    )


@router.get("/{person_id}", response_model=schemas.PersonResponse, response_model_exclude_none=True)
async def get_person(
    person_id: str,
    service: PersonService = Depends(get_person_service),
) -> schemas.PersonResponse:
    return await service.get_person(parse_person_id(person_id))


@router.patch(
    "/{person_id}",
    response_model=schemas.PersonResponse,
    response_model_exclude_none=True,
    openapi_extra=_PERSON_BODY,
)
async def update_person(
    person_id: str,
    request: Request,
    service: PersonService = Depends(get_person_service),
) -> schemas.PersonResponse:
    parsed_id = parse_person_id(person_id, message="Invalid id format")
    try:
        payload = decode_person_request(await request.body())
    except ValidationError as exc:
        raise ValidationFailed("Invalid json", {"body": "invalid json format"}) from exc

    return await service.update_person(parsed_id, payload)


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_person(
    person_id: str,
    service: PersonService = Depends(get_person_service),
) -> Response:
    await service.delete_person(parse_person_id(person_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
