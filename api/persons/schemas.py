"""
Pydantic schemas for the person endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

MUTABLE_FIELDS = ("name", "age", "address", "work")


class PersonRequest(BaseModel):
    """
    Inbound body for create and update.

    Every field is optional so the same model serves partial updates. Which
    keys the client actually sent is kept in `model_fields_set`; `changes()`
    turns that into the set of values an update may apply.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str | None = None
    age: int | None = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    address: str | None = None
    work: str | None = None

    def changes(self) -> dict[str, Any]:
        # A key sent as null counts as not sent: `{"age": null}` leaves age alone.
        return {
            field: getattr(self, field)
            for field in MUTABLE_FIELDS
            if field in self.model_fields_set and getattr(self, field) is not None
        }


def has_blank_name(name: str | None) -> bool:
    return name is None or not name.strip()


class PersonResponse(BaseModel):
    id: int
    name: str
    age: int | None = None
    address: str | None = None
    work: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PersonResponse":
        return cls(
            id=int(row["id"]),
            name=str(row["name"]),
            age=row.get("age"),
            address=row.get("address"),
            work=row.get("work"),
        )


class ErrorResponse(BaseModel):
    message: str


class ValidationErrorResponse(BaseModel):
    message: str
    errors: dict[str, str]
