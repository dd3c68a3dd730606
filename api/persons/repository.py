"""
Person persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database, affected_rows

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS persons (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    age INT,
    address TEXT,
    work TEXT
)
"""


class PersonRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def ensure_schema(self) -> None:
        await self.db.execute(CREATE_TABLE_SQL)

    async def list_persons(self) -> list[dict[str, Any]]:
        return await self.db.fetch_all(
            """
            SELECT id, name, age, address, work
            FROM persons
            ORDER BY id
            """
        )

    async def insert_person(
        self,
        *,
        name: str,
        age: int | None = None,
        address: str | None = None,
        work: str | None = None,
    ) -> int:
        person_id = await self.db.fetch_value(
            """
            INSERT INTO persons (name, age, address, work)
            VALUES ($1, $2, $3, $4)
            RETURNING id
            """,
            name,
            age,
            address,
            work,
        )
        if person_id is None:
            raise RuntimeError("Failed to insert person.")
        return int(person_id)

    async def get_person(self, person_id: int) -> dict[str, Any] | None:
        return await self.db.fetch_one(
            """
            SELECT id, name, age, address, work
            FROM persons
            WHERE id = $1
            """,
            person_id,
        )

    async def person_exists(self, person_id: int) -> bool:
        exists = await self.db.fetch_value(
            "SELECT EXISTS(SELECT 1 FROM persons WHERE id = $1)",
            person_id,
        )
        return bool(exists)

    async def get_mutable_fields(self, person_id: int) -> dict[str, Any] | None:
        return await self.db.fetch_one(
            """
            SELECT name, age, address, work
            FROM persons
            WHERE id = $1
            """,
            person_id,
        )

    async def update_person(
        self,
        person_id: int,
        *,
        name: str,
        age: int | None,
        address: str | None,
        work: str | None,
    ) -> bool:
        """
        Overwrite all four mutable columns. Returns False when no row matched.
        """
        status = await self.db.execute(
            """
            UPDATE persons
            SET name = $1,
                age = $2,
                address = $3,
                work = $4
            WHERE id = $5
            """,
            name,
            age,
            address,
            work,
            person_id,
        )
        return affected_rows(status) > 0

    async def delete_person(self, person_id: int) -> bool:
        status = await self.db.execute(
            """
            DELETE FROM persons
            WHERE id = $1
            """,
            person_id,
        )
        return affected_rows(status) > 0
