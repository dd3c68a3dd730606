from __future__ import annotations

import copy
from typing import Any

import pytest
from fastapi.testclient import TestClient

from main import create_app
from persons.repository import PersonRepository
from persons.router import get_person_service
from persons.service import PersonService


class InMemoryPersonRepository(PersonRepository):
    """
    Dict-backed stand-in for the SQL repository with the same method surface.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.writes: list[tuple[int, dict[str, Any]]] = []

    async def ensure_schema(self) -> None:
        return None

    async def list_persons(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(self.rows[k]) for k in sorted(self.rows)]

    async def insert_person(self, *, name, age=None, address=None, work=None) -> int:
        person_id = self.next_id
        self.next_id += 1
        self.rows[person_id] = {
            "id": person_id,
            "name": name,
            "age": age,
            "address": address,
            "work": work,
        }
        return person_id

    async def get_person(self, person_id: int) -> dict[str, Any] | None:
        row = self.rows.get(person_id)
        return copy.deepcopy(row) if row is not None else None

    async def person_exists(self, person_id: int) -> bool:
        return person_id in self.rows

    async def get_mutable_fields(self, person_id: int) -> dict[str, Any] | None:
        row = self.rows.get(person_id)
        if row is None:
            return None
        return {k: row[k] for k in ("name", "age", "address", "work")}

    async def update_person(self, person_id: int, *, name, age, address, work) -> bool:
        if person_id not in self.rows:
            return False
        values = {"name": name, "age": age, "address": address, "work": work}
        self.writes.append((person_id, values))
        self.rows[person_id].update(values)
        return True

    async def delete_person(self, person_id: int) -> bool:
        return self.rows.pop(person_id, None) is not None


class BrokenPersonRepository(InMemoryPersonRepository):
    """
    Repository whose every call fails the way a dropped connection does.
    """

    async def list_persons(self):
        raise ConnectionRefusedError("connection refused")

    async def insert_person(self, **fields):
        raise ConnectionRefusedError("connection refused")

    async def get_person(self, person_id):
        raise ConnectionRefusedError("connection refused")

    async def person_exists(self, person_id):
        raise ConnectionRefusedError("connection refused")

    async def get_mutable_fields(self, person_id):
        raise ConnectionRefusedError("connection refused")

    async def update_person(self, person_id, **fields):
        raise ConnectionRefusedError("connection refused")

    async def delete_person(self, person_id):
        raise ConnectionRefusedError("connection refused")


@pytest.fixture
def repository() -> InMemoryPersonRepository:
    return InMemoryPersonRepository()


def _client_for(repository: PersonRepository) -> TestClient:
    app = create_app()
    service = PersonService(repository)
    app.dependency_overrides[get_person_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def client(repository) -> TestClient:
    return _client_for(repository)


@pytest.fixture
def broken_repository() -> BrokenPersonRepository:
    return BrokenPersonRepository()


@pytest.fixture
def broken_client(broken_repository) -> TestClient:
    return _client_for(broken_repository)


@pytest.fixture
def create_person(client):
    def _create(**fields) -> int:
        resp = client.post("/api/v1/persons", json=fields)
        assert resp.status_code == 201, resp.text
        return int(resp.headers["Location"].rsplit("/", 1)[-1])

    return _create
